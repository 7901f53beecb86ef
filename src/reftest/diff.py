from dataclasses import dataclass

import numpy as np

from reftest.surface import Surface

EMPHASIZE_FACTOR = 4
EMPHASIZE_OFFSET = 128


@dataclass(frozen=True)
class DifferentSizes:
    left_size: tuple[int, int]
    right_size: tuple[int, int]


@dataclass(frozen=True, eq=False)
class Diff:
    num_pixels_changed: int
    max_diff: int
    surface: Surface


BufferDiff = Diff | DifferentSizes


def _emphasize(pixel_diff: np.ndarray) -> np.ndarray:
    # small differences must still be visible in the diff image
    wide = pixel_diff.astype(np.uint16)
    emphasized = np.where(wide > 0, wide * EMPHASIZE_FACTOR + EMPHASIZE_OFFSET, 0)
    return np.minimum(emphasized, 255).astype(np.uint8)


def compare_surfaces(left: Surface, right: Surface) -> BufferDiff:
    """Compare two surfaces pixel by pixel.

    Pixels are compared on their premultiplied channel values. The returned diff surface
    is opaque black where the surfaces agree and shows the emphasized channel differences
    elsewhere; a difference in alpha only is shown in grey.

    :param left: the first surface, usually the rendered output
    :param right: the second surface, usually the reference
    :return: `DifferentSizes` if the surfaces cannot be compared, a `Diff` otherwise
    """
    if left.size != right.size:
        return DifferentSizes(left.size, right.size)

    pixel_diff = np.abs(left.data.astype(np.int16) - right.data.astype(np.int16)).astype(np.uint8)
    changed = np.any(pixel_diff > 0, axis=2)

    num_pixels_changed = int(np.count_nonzero(changed))
    max_diff = int(pixel_diff.max()) if pixel_diff.size else 0

    emphasized = _emphasize(pixel_diff)
    alpha_only = changed & ~np.any(pixel_diff[..., :3] > 0, axis=2)
    emphasized[alpha_only, :3] = emphasized[alpha_only, 3:4]

    visualization = np.zeros_like(emphasized)
    visualization[changed] = emphasized[changed]
    visualization[..., 3] = 255

    return Diff(
        num_pixels_changed=num_pixels_changed,
        max_diff=max_diff,
        surface=Surface(visualization, left.surface_type),
    )
