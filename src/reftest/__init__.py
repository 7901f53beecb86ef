"""Helpers for comparing rendered surfaces against reference images in tests."""

from reftest.compare import (
    ImagesTooDifferentError,
    SurfaceSizeMismatchError,
    compare_to_file,
    compare_to_surface,
)
from reftest.config import output_dir, tolerable_difference
from reftest.diff import Diff, DifferentSizes, compare_surfaces
from reftest.surface import Surface, SurfaceType, load_png_as_argb

__all__ = [
    "Diff",
    "DifferentSizes",
    "ImagesTooDifferentError",
    "Surface",
    "SurfaceSizeMismatchError",
    "SurfaceType",
    "compare_surfaces",
    "compare_to_file",
    "compare_to_surface",
    "load_png_as_argb",
    "output_dir",
    "tolerable_difference",
]
