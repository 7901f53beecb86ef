from collections.abc import Callable
from pathlib import Path

import numpy as np
import pytest
from pytest import MonkeyPatch

from reftest.config import OUTPUT_DIR_ENV_VAR, TOLERANCE_ENV_VAR, tolerable_difference
from reftest.surface import Surface, SurfaceType


def solid_surface(
    width: int,
    height: int,
    color: tuple[int, int, int, int],
    surface_type: SurfaceType = SurfaceType.SRGB,
) -> Surface:
    rgba = np.full((height, width, 4), color, dtype=np.uint8)
    return Surface.from_rgba(rgba, surface_type)


@pytest.fixture(autouse=True)
def default_tolerance(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.delenv(TOLERANCE_ENV_VAR, raising=False)
    tolerable_difference(reload=True)


@pytest.fixture()
def set_tolerance(monkeypatch: MonkeyPatch) -> Callable[[str], int]:
    def _set_tolerance(value: str) -> int:
        monkeypatch.setenv(TOLERANCE_ENV_VAR, value)
        return tolerable_difference(reload=True)

    return _set_tolerance


@pytest.fixture()
def out_dir(tmp_path: Path, monkeypatch: MonkeyPatch) -> Path:
    path = tmp_path / "reftest-out"
    monkeypatch.setenv(OUTPUT_DIR_ENV_VAR, str(path))
    return path


@pytest.fixture()
def output_surface() -> Surface:
    return solid_surface(4, 3, (100, 150, 200, 255))


@pytest.fixture()
def offset_reference() -> Callable[[int], Surface]:
    """Returns a factory for references differing from `output_surface` by a uniform offset in R, G and B."""

    def _offset_reference(offset: int) -> Surface:
        return solid_surface(4, 3, (100 + offset, 150 + offset, 200 + offset, 255))

    return _offset_reference


@pytest.fixture()
def make_solid_surface() -> Callable[..., Surface]:
    return solid_surface
