#!/usr/bin/env python3
"""
PDF encoder for rendered pages.

Writes the :class:`~slide_editor.page_renderer.Page` list produced by the
page renderer into a PDF with reportlab.  One TrueType font is embedded for
all text so that non-Latin content renders correctly; a deck containing
characters the font has no glyphs for is rejected before anything is drawn.
"""

import hashlib
import io
import logging
import unicodedata
from pathlib import Path
from typing import Iterable, List, Optional

from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.pdfgen import canvas

from .page_renderer import WHITE, DrawImage, DrawText, FillRect, Page

logger = logging.getLogger(__name__)


class ExportError(Exception):
    """Export could not be set up (font, document); no file is produced."""


class ExportInProgressError(ExportError):
    """An export was requested while another one is still running."""


def register_font(font_path: Path) -> str:
    """Register *font_path* with reportlab and return its font name.

    The name includes a digest of the resolved path, so two fonts sharing a
    file name in different directories get separate registrations.
    """
    font_path = Path(font_path)
    digest = hashlib.sha1(str(font_path.resolve()).encode("utf-8")).hexdigest()[:8]
    name = f"SlideEditor-{font_path.stem}-{digest}"
    if name in pdfmetrics.getRegisteredFontNames():
        return name
    try:
        pdfmetrics.registerFont(TTFont(name, str(font_path)))
    except (TTFError, OSError) as exc:
        raise ExportError(f"Cannot embed font {font_path}: {exc}") from exc
    logger.debug("Registered font %s from %s", name, font_path)
    return name


def missing_glyphs(font_name: str, texts: Iterable[str]) -> str:
    """Characters of *texts* that the registered font cannot draw, sorted.

    Whitespace and control/format characters are ignored.
    """
    char_to_glyph = pdfmetrics.getFont(font_name).face.charToGlyph
    missing = set()
    for text in texts:
        for char in text:
            if char.isspace() or unicodedata.category(char).startswith("C"):
                continue
            if ord(char) not in char_to_glyph:
                missing.add(char)
    return "".join(sorted(missing))


class PDFEncoder:
    """
    Serialize pages to PDF bytes.

    Args:
        font_path: TrueType font used for every text draw.
    """

    def __init__(self, font_path: Path):
        self.font_path = Path(font_path)

    def encode(self, pages: List[Page], title: Optional[str] = None) -> bytes:
        font_name = register_font(self.font_path)
        missing = missing_glyphs(font_name, (op.text for page in pages for op in page.texts))
        if missing:
            raise ExportError(
                f"Font {self.font_path} has no glyphs for {missing!r}; "
                "set SLIDE_EDITOR_FONT to a TrueType font that covers them"
            )

        buffer = io.BytesIO()
        try:
            pdf = canvas.Canvas(buffer)
            pdf.setTitle(title or "Presentation")
        except Exception as exc:
            raise ExportError(f"Cannot create PDF document: {exc}") from exc

        for index, page in enumerate(pages):
            logger.debug("Encoding page %d/%d (%d operations)", index + 1, len(pages), len(page.operations))
            pdf.setPageSize((page.width, page.height))
            for op in page.operations:
                if isinstance(op, FillRect):
                    self._fill(pdf, op)
                elif isinstance(op, DrawText):
                    self._text(pdf, op, font_name)
                elif isinstance(op, DrawImage):
                    self._image(pdf, op, page)
                else:
                    raise TypeError(f"Unknown draw operation: {type(op).__name__}")
            pdf.showPage()

        pdf.save()
        return buffer.getvalue()

    @staticmethod
    def _fill(pdf, op: FillRect) -> None:
        pdf.setFillColorRGB(*op.color)
        pdf.rect(op.x, op.y, op.width, op.height, stroke=0, fill=1)

    @staticmethod
    def _text(pdf, op: DrawText, font_name: str) -> None:
        pdf.setFillColorRGB(*op.color)
        pdf.setFont(font_name, op.font_size)
        pdf.drawString(op.x, op.y, op.text)

    def _image(self, pdf, op: DrawImage, page: Page) -> None:
        try:
            reader = ImageReader(io.BytesIO(op.image.data))
            pdf.drawImage(
                reader,
                op.x,
                op.y,
                width=op.width,
                height=op.height,
                preserveAspectRatio=False,
                mask="auto",
            )
        except Exception as exc:
            if op.is_background:
                logger.warning("Failed to embed background image on slide %s: %s. Using white.", page.slide_id, exc)
                self._fill(pdf, FillRect(0, 0, page.width, page.height, WHITE))
            else:
                logger.warning("Failed to embed image element %s: %s. Skipping.", op.element_id, exc)
