#!/usr/bin/env python3
"""
PowerPoint renderer for editor presentations.

PowerPoint uses a top-left origin like the document model, so positions are
converted from pixels to inches (96 DPI) without flipping.
"""

import io
import logging

from pptx import Presentation as PptxPresentation
from pptx.dml.color import RGBColor
from pptx.util import Inches, Pt

from .assets import AssetError, ImageLoader, describe_source
from .config import PAGE_HEIGHT, PAGE_WIDTH
from .models import HEX_COLOR_RE, ColorBackground, ImageBackground, ImageElement, Presentation, TextElement

logger = logging.getLogger(__name__)

BLANK_LAYOUT = 6


# Helper function to convert pixels to inches
def px(pixels):
    return Inches(pixels / 96)


def hex_to_rgb_color(hex_color: str) -> RGBColor:
    """Convert ``#RRGGBB`` to an :class:`RGBColor`; malformed input gives black."""
    if not HEX_COLOR_RE.match(hex_color or ''):
        return RGBColor(0, 0, 0)
    return RGBColor.from_string(hex_color[1:].upper())


class PPTXRenderer:
    """
    Renderer for converting editor presentations to PowerPoint files.
    """

    def __init__(self, loader: ImageLoader, page_width: float = PAGE_WIDTH, page_height: float = PAGE_HEIGHT):
        self.loader = loader
        self.page_width = page_width
        self.page_height = page_height

    async def render(self, presentation: Presentation, output_path: str):
        """
        Render *presentation* to a .pptx file.

        Args:
            presentation: The deck to export
            output_path: Path where the PPTX file should be saved
        """
        prs = PptxPresentation()
        prs.slide_width = px(self.page_width)
        prs.slide_height = px(self.page_height)

        for slide_idx, slide in enumerate(presentation.slides):
            logger.debug("PPTX slide %d/%d (%s)", slide_idx + 1, len(presentation.slides), slide.id)
            pptx_slide = prs.slides.add_slide(prs.slide_layouts[BLANK_LAYOUT])

            background = slide.background
            if isinstance(background, ColorBackground):
                self._fill_background(pptx_slide, hex_to_rgb_color(background.color_hex))
            elif isinstance(background, ImageBackground):
                if not await self._add_picture(pptx_slide, background.source, 0, 0, self.page_width, self.page_height):
                    self._fill_background(pptx_slide, RGBColor(255, 255, 255))

            for element in slide.elements:
                if isinstance(element, TextElement):
                    self._add_text(pptx_slide, element)
                elif isinstance(element, ImageElement):
                    await self._add_picture(
                        pptx_slide,
                        element.content,
                        element.position.x,
                        element.position.y,
                        element.size.width,
                        element.size.height,
                    )

        prs.save(str(output_path))
        return output_path

    @staticmethod
    def _fill_background(pptx_slide, color: RGBColor):
        fill = pptx_slide.background.fill
        fill.solid()
        fill.fore_color.rgb = color

    @staticmethod
    def _add_text(pptx_slide, element: TextElement):
        textbox = pptx_slide.shapes.add_textbox(
            px(element.position.x), px(element.position.y), px(element.size.width), px(element.size.height)
        )
        text_frame = textbox.text_frame
        text_frame.word_wrap = False
        paragraph = text_frame.paragraphs[0]
        run = paragraph.add_run()
        run.text = element.content
        run.font.name = element.font_family
        # 1 px ≈ 1 pt at standard screen resolution
        run.font.size = Pt(element.font_size)
        run.font.color.rgb = hex_to_rgb_color(element.font_color)

    async def _add_picture(self, pptx_slide, source: str, x, y, width, height) -> bool:
        try:
            asset = await self.loader.load(source)
            pptx_slide.shapes.add_picture(io.BytesIO(asset.data), px(x), px(y), px(width), px(height))
        except (AssetError, OSError, ValueError) as exc:
            logger.warning("Skipping image %s: %s", describe_source(source), exc)
            return False
        return True
