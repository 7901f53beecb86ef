from dataclasses import dataclass
from enum import Enum
from typing import IO, Self

import numpy as np
from PIL import Image

from reftest.types import PathLike


class SurfaceType(Enum):
    SRGB = "srgb"
    LINEAR_RGB = "linear_rgb"
    ALPHA_ONLY = "alpha_only"


class PngLoadError(OSError):
    pass


def premultiply(rgba: np.ndarray) -> np.ndarray:
    """Convert straight-alpha RGBA bytes of shape (H, W, 4) to premultiplied RGBA bytes."""
    wide = rgba.astype(np.uint16)
    alpha = wide[..., 3:4]
    result = wide.copy()
    result[..., :3] = (wide[..., :3] * alpha + 127) // 255
    return result.astype(np.uint8)


def unpremultiply(rgba: np.ndarray) -> np.ndarray:
    """Convert premultiplied RGBA bytes of shape (H, W, 4) to straight-alpha RGBA bytes.

    Fully transparent pixels become transparent black.
    """
    wide = rgba.astype(np.uint32)
    alpha = wide[..., 3:4]
    safe_alpha = np.maximum(alpha, 1)
    color = (wide[..., :3] * 255 + safe_alpha // 2) // safe_alpha
    color = np.where(alpha == 0, 0, np.minimum(color, 255))

    result = wide.copy()
    result[..., :3] = color
    return result.astype(np.uint8)


@dataclass(frozen=True, eq=False)
class Surface:
    """An immutable image buffer holding premultiplied RGBA bytes of shape (height, width, 4)."""

    data: np.ndarray
    surface_type: SurfaceType = SurfaceType.SRGB

    def __post_init__(self) -> None:
        data = np.asarray(self.data)
        if data.ndim != 3 or data.shape[2] != 4:
            raise ValueError(f"Expected pixel data of shape (height, width, 4), got {data.shape}")
        if data.dtype != np.uint8:
            raise ValueError(f"Expected pixel data of dtype uint8, got {data.dtype}")

        data = data.copy()
        data.flags.writeable = False
        object.__setattr__(self, "data", data)

    @classmethod
    def from_rgba(cls, rgba: np.ndarray, surface_type: SurfaceType = SurfaceType.SRGB) -> Self:
        """Create a surface from straight-alpha RGBA bytes."""
        return cls(premultiply(np.asarray(rgba, dtype=np.uint8)), surface_type)

    @classmethod
    def wrap(cls, image: Image.Image, surface_type: SurfaceType = SurfaceType.SRGB) -> Self:
        """Create a surface from a decoded image of any mode."""
        return cls.from_rgba(np.array(image.convert("RGBA")), surface_type)

    @property
    def width(self) -> int:
        return self.data.shape[1]

    @property
    def height(self) -> int:
        return self.data.shape[0]

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def to_image(self) -> Image.Image:
        """Convert the surface to a straight-alpha RGBA image that can be encoded."""
        return Image.fromarray(unpremultiply(self.data))

    def write_to_png(self, fp: PathLike | IO[bytes]) -> None:
        self.to_image().save(fp, format="PNG")


def load_png_as_argb(path: PathLike) -> Image.Image:
    """Load a PNG file and convert it to RGBA.

    The PNG may come in any mode (e.g. RGB without an alpha channel), so it is composited
    onto a transparent RGBA image of the same size.

    :param path: the path of the PNG file
    :return: the RGBA image
    """
    try:
        with Image.open(path, formats=["PNG"]) as png:
            png.load()
            argb = Image.new("RGBA", png.size, (0, 0, 0, 0))
            argb.alpha_composite(png.convert("RGBA"))
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
        raise PngLoadError(f"Could not load PNG from {path}") from e

    return argb
