import abc
import logging
from pathlib import Path
from typing import Any, cast

import resvg_py

from reftest.surface import Surface, SurfaceType
from reftest.types import PathLike
from reftest.utils import image_from_bytes

log = logging.getLogger(__name__)


class BaseSVGRenderer(abc.ABC):
    """Base class for SVG renderers producing surfaces that can be compared to reference images."""

    @abc.abstractmethod
    def render_svg_string(
        self,
        svg_string: str,
        width: int | None = None,
        height: int | None = None,
    ) -> Surface:
        pass

    def render_svg_file(
        self,
        svg_path: PathLike,
        width: int | None = None,
        height: int | None = None,
    ) -> Surface:
        """Render an SVG file to a surface.

        :param svg_path: Path to the SVG file to render.
        :param width: The width of the rendered surface. Inferred from the SVG if not given.
        :param height: The height of the rendered surface. Inferred from the SVG if not given.
        """
        svg_string = Path(svg_path).read_text()
        return self.render_svg_string(svg_string, width=width, height=height)

    # meant to be overridden if necessary
    def teardown(self) -> None:  # noqa: B027
        pass


class ResvgRenderer(BaseSVGRenderer):
    def __init__(self, dpi: int | None = None):
        self.dpi = dpi

    def render_svg_string(
        self,
        svg_string: str,
        width: int | None = None,
        height: int | None = None,
    ) -> Surface:
        options: dict[str, Any] = {}
        if width is not None:
            options["width"] = width
        if height is not None:
            options["height"] = height
        if self.dpi is not None:
            options["dpi"] = self.dpi

        log.debug(f"Rendering SVG with resvg, options: {options}")

        # resvg_py.svg_to_bytes returns a list of ints in some versions and bytes in others
        result = cast(list[int] | bytes, resvg_py.svg_to_bytes(svg_string=svg_string, **options))

        with image_from_bytes(bytes(result)) as image:
            return Surface.wrap(image, SurfaceType.SRGB)
