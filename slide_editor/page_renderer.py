#!/usr/bin/env python3
"""
Page renderer: turns a presentation into fixed-size page descriptions.

Each slide becomes one :class:`Page` holding an ordered list of draw
operations (background first, then elements in z-order).  Coordinates are
in the export space, whose origin is the *bottom-left* corner of the page;
the document model uses a top-left origin, so every element is flipped with
``page_height - y - height``.

Image assets are loaded here, one at a time.  A background that cannot be
loaded becomes a white fill; an element image that cannot be loaded is left
out.  Neither stops the export.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from .assets import AssetError, ImageAsset, ImageLoader, UnsupportedImageFormat, describe_source
from .config import PAGE_HEIGHT, PAGE_WIDTH
from .models import (
    HEX_COLOR_RE,
    ColorBackground,
    Element,
    ImageBackground,
    ImageElement,
    Presentation,
    Slide,
    TextElement,
)

logger = logging.getLogger(__name__)

RGB = Tuple[float, float, float]
WHITE: RGB = (1.0, 1.0, 1.0)


def hex_to_rgb(hex_color: str) -> RGB:
    """Decode ``#RRGGBB`` into three channels in ``[0, 1]``.

    Channels are read from character pairs 1-2, 3-4 and 5-6 after the ``#``.
    Malformed input decodes to black.
    """
    if not HEX_COLOR_RE.match(hex_color or ""):
        logger.debug("Malformed colour %r, using black", hex_color)
        return (0.0, 0.0, 0.0)
    return tuple(int(hex_color[i:i + 2], 16) / 255 for i in (1, 3, 5))


def flip_y(y: float, height: float, page_height: float) -> float:
    """Convert a top-left-origin y to the bottom-left origin of the page."""
    return page_height - y - height


# ---------------------------------------------------------------------------
# Draw operations
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FillRect:
    x: float
    y: float
    width: float
    height: float
    color: RGB


@dataclass(frozen=True)
class DrawText:
    text: str
    x: float
    y: float
    font_size: float
    color: RGB
    element_id: Optional[str] = None


@dataclass(frozen=True)
class DrawImage:
    image: ImageAsset
    x: float
    y: float
    width: float
    height: float
    is_background: bool = False
    element_id: Optional[str] = None


DrawOp = Union[FillRect, DrawText, DrawImage]


@dataclass
class Page:
    width: float
    height: float
    slide_id: str = ""
    operations: List[DrawOp] = field(default_factory=list)

    @property
    def texts(self) -> List[DrawText]:
        return [op for op in self.operations if isinstance(op, DrawText)]

    @property
    def images(self) -> List[DrawImage]:
        return [op for op in self.operations if isinstance(op, DrawImage)]


class PageRenderer:
    """
    Render presentations to :class:`Page` lists.

    Args:
        loader: Image loader used for backgrounds and image elements.
        page_width: Width of every page.
        page_height: Height of every page.
    """

    def __init__(self, loader: ImageLoader, page_width: float = PAGE_WIDTH, page_height: float = PAGE_HEIGHT):
        self.loader = loader
        self.page_width = page_width
        self.page_height = page_height

    async def render(self, presentation: Presentation) -> List[Page]:
        pages = []
        for index, slide in enumerate(presentation.slides):
            logger.debug("Rendering slide %d/%d (%s)", index + 1, len(presentation.slides), slide.id)
            pages.append(await self.render_slide(slide))
        return pages

    async def render_slide(self, slide: Slide) -> Page:
        page = Page(width=self.page_width, height=self.page_height, slide_id=slide.id)
        page.operations.append(await self._render_background(slide))
        for element in slide.elements:
            op = await self._render_element(element)
            if op is not None:
                page.operations.append(op)
        return page

    def _full_page_fill(self, color: RGB) -> FillRect:
        return FillRect(0, 0, self.page_width, self.page_height, color)

    async def _render_background(self, slide: Slide) -> DrawOp:
        background = slide.background
        if isinstance(background, ColorBackground):
            return self._full_page_fill(hex_to_rgb(background.color_hex))
        if isinstance(background, ImageBackground):
            asset = await self._load(background.source, f"background of slide {slide.id}")
            if asset is None:
                return self._full_page_fill(WHITE)
            return DrawImage(asset, 0, 0, self.page_width, self.page_height, is_background=True)
        raise TypeError(f"Unknown background type: {type(background).__name__}")

    async def _render_element(self, element: Element) -> Optional[DrawOp]:
        x = element.position.x
        y = flip_y(element.position.y, element.size.height, self.page_height)
        if isinstance(element, TextElement):
            return DrawText(
                text=element.content,
                x=x,
                y=y,
                font_size=element.font_size,
                color=hex_to_rgb(element.font_color),
                element_id=element.id,
            )
        if isinstance(element, ImageElement):
            asset = await self._load(element.content, f"image element {element.id}")
            if asset is None:
                return None
            return DrawImage(
                asset, x, y, element.size.width, element.size.height, element_id=element.id
            )
        raise TypeError(f"Unknown element type: {type(element).__name__}")

    async def _load(self, source: str, what: str) -> Optional[ImageAsset]:
        try:
            return await self.loader.load(source)
        except UnsupportedImageFormat as exc:
            logger.warning("Skipping %s: %s", what, exc)
        except AssetError as exc:
            logger.warning("Could not load %s from %s: %s", what, describe_source(source), exc)
        return None
