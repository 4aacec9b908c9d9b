"""Color quantization for 256-color terminals.

Rendered colors are unclamped floats. Before display they are clamped to
[0, 1] (NaN becomes 0) and mapped onto the 6x6x6 color cube of the xterm
256-color palette:

    index = 16 + 36 * int(5 * r) + 6 * int(5 * g) + int(5 * b)

This is the only place where clamping happens.
"""

import numpy as np
import numpy.typing as npt

# First index of the 6x6x6 color cube in the xterm palette
CUBE_OFFSET = 16

# Each channel is quantized to LEVELS values (0..LEVELS-1)
LEVELS = 6

# Channel values of the cube levels, as used by xterm
CUBE_CHANNEL_VALUES = (0, 95, 135, 175, 215, 255)


def clamp_colors(framebuffer: npt.NDArray[np.floating]) -> npt.NDArray[np.float32]:
    """Clamp a framebuffer to [0, 1], replacing NaN with 0.

    Args:
        framebuffer: Array of shape (H, W, 3) with arbitrary float values.

    Returns:
        A float32 array of the same shape with values in [0, 1].
    """
    image = np.nan_to_num(framebuffer.astype(np.float32), nan=0.0, posinf=1.0, neginf=0.0)
    return np.clip(image, 0.0, 1.0)


def quantize(framebuffer: npt.NDArray[np.floating]) -> npt.NDArray[np.int32]:
    """Map a framebuffer to xterm 256-color palette indices.

    Args:
        framebuffer: Array of shape (H, W, 3), unclamped.

    Returns:
        Integer array of shape (H, W) with values in [16, 231].
    """
    levels = (clamp_colors(framebuffer) * (LEVELS - 1)).astype(np.int32)
    return CUBE_OFFSET + 36 * levels[..., 0] + 6 * levels[..., 1] + levels[..., 2]


def palette_to_rgb(indices: npt.NDArray[np.integer]) -> npt.NDArray[np.uint8]:
    """Convert color-cube indices back to the RGB values a terminal shows.

    Args:
        indices: Integer array of palette indices in [16, 231].

    Returns:
        uint8 array with a trailing RGB axis.

    Raises:
        ValueError: If any index lies outside the color cube.
    """
    indices = np.asarray(indices)
    if indices.size and (indices.min() < CUBE_OFFSET or indices.max() > CUBE_OFFSET + 215):
        raise ValueError("Palette indices must lie in the color cube [16, 231]")
    cube = indices - CUBE_OFFSET
    values = np.asarray(CUBE_CHANNEL_VALUES, dtype=np.uint8)
    return np.stack([values[cube // 36], values[(cube // 6) % 6], values[cube % 6]], axis=-1)
