"""Utilities for the test suite to compare rendered surfaces to reference images.

Differences up to `DISTINGUISHABLE_THRESHOLD` are considered noise and are ignored entirely.
Larger differences cause the output surface and a visual diff to be written to the output
directory (see `reftest.config.output_dir`), and the comparison fails if the difference
also exceeds the configured tolerance (see `reftest.config.tolerable_difference`).
"""

from pathlib import Path

from reftest.config import output_dir, tolerable_difference
from reftest.diff import BufferDiff, Diff, DifferentSizes, compare_surfaces
from reftest.surface import Surface, SurfaceType, load_png_as_argb
from reftest.types import PathLike

DISTINGUISHABLE_THRESHOLD = 2


class SurfaceSizeMismatchError(RuntimeError):
    pass


class ImagesTooDifferentError(AssertionError):
    pass


def distinguishable(diff: Diff) -> bool:
    return diff.max_diff > DISTINGUISHABLE_THRESHOLD


def inacceptable(diff: Diff) -> bool:
    return diff.max_diff > tolerable_difference()


def compare_to_file(
    output_surface: Surface,
    output_base_name: str,
    reference_path: PathLike,
) -> None:
    """Compares `output_surface` to the reference image stored at `reference_path`.

    The reference is loaded as an sRGB surface and compared with `compare_to_surface`,
    which also describes the failure behavior.
    """
    png = load_png_as_argb(reference_path)
    reference_surface = Surface.wrap(png, SurfaceType.SRGB)

    compare_to_surface(output_surface, reference_surface, output_base_name)


def compare_to_surface(
    output_surface: Surface,
    reference_surface: Surface,
    output_base_name: str,
) -> None:
    """Compares two surfaces and raises if they are too different.

    The `output_base_name` is used to write test results if the surfaces are
    visibly different. If this is `foo`, `foo-out.png` will contain `output_surface`
    and `foo-diff.png` a visual diff between `output_surface` and `reference_surface`.

    :raises ImagesTooDifferentError: if the difference exceeds the tolerance
    :raises SurfaceSizeMismatchError: if the surfaces are not of the same size
    """
    diff = compare_surfaces(output_surface, reference_surface)
    evaluate_diff(diff, output_surface, output_base_name)


def evaluate_diff(diff: BufferDiff, output_surface: Surface, output_base_name: str) -> None:
    if isinstance(diff, DifferentSizes):
        raise SurfaceSizeMismatchError(
            f"Surfaces should be of the same size, got {diff.left_size} and {diff.right_size}",
        )

    if not distinguishable(diff):
        return

    print(
        f"{output_base_name}: {diff.num_pixels_changed} pixels changed "
        f"with maximum difference of {diff.max_diff}",
    )

    out_path = write_to_file(output_surface, output_base_name, "out")
    diff_path = write_to_file(diff.surface, output_base_name, "diff")

    if inacceptable(diff):
        raise ImagesTooDifferentError(
            f"surfaces are too different: maximum difference {diff.max_diff} exceeds "
            f"tolerance {tolerable_difference()}. See {out_path} and {diff_path} for visual inspection.",
        )


def write_to_file(surface: Surface, output_base_name: str, suffix: str) -> Path:
    path = output_dir() / f"{output_base_name}-{suffix}.png"
    print(f"{suffix}: {path}")
    surface.write_to_png(path)
    return path
