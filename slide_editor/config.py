"""Runtime settings for export and history.

Values come from keyword arguments first, then ``SLIDE_EDITOR_*``
environment variables, then the defaults below.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

PAGE_WIDTH = 1000
PAGE_HEIGHT = 600
FETCH_TIMEOUT = 10.0

# Fonts with wide Unicode coverage, checked in order
FONT_CANDIDATES = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/noto/NotoSans-Regular.ttf",
    "/usr/share/fonts/noto/NotoSans-Regular.ttf",
    "/System/Library/Fonts/Supplemental/Arial Unicode.ttf",
    "/Library/Fonts/Arial Unicode.ttf",
    "C:/Windows/Fonts/arialuni.ttf",
    "C:/Windows/Fonts/arial.ttf",
]


def bundled_font_path() -> Path:
    """Path to the Vera font shipped inside the reportlab package."""
    import reportlab

    return Path(reportlab.__file__).resolve().parent / "fonts" / "Vera.ttf"


def find_unicode_font(candidates: Optional[List[str]] = None) -> Path:
    """Return the first existing font in *candidates*, else reportlab's Vera.

    Vera covers Latin only; PDF export refuses decks with characters outside
    the chosen font instead of drawing empty boxes.
    """
    for candidate in candidates if candidates is not None else FONT_CANDIDATES:
        path = Path(candidate)
        if path.is_file():
            return path
    fallback = bundled_font_path()
    logger.warning(
        "No Unicode font found on this system, using %s (Latin only; other scripts will fail to export). "
        "Set SLIDE_EDITOR_FONT to a TTF with wider coverage.", fallback
    )
    return fallback


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


@dataclass
class EditorSettings:
    """
    Settings shared by the exporter, renderers and history.

    Attributes
    ----------
    page_width, page_height
        Size of every exported page, in PDF units (1 unit = 1 slide pixel).
    font_path
        TrueType font embedded for all text.  ``None`` means auto-discover.
    fetch_timeout
        Seconds to wait for one remote image before giving up on it.
    history_depth
        Maximum undo depth; ``None`` is unbounded.
    debug
        Verbose logging.
    """
    page_width: float = PAGE_WIDTH
    page_height: float = PAGE_HEIGHT
    font_path: Optional[Path] = None
    fetch_timeout: float = FETCH_TIMEOUT
    history_depth: Optional[int] = None
    debug: bool = False
    extra_font_candidates: List[str] = field(default_factory=list)

    def __post_init__(self):
        if self.page_width <= 0 or self.page_height <= 0:
            raise ValueError(f"Page size must be positive, got {self.page_width}x{self.page_height}")
        if self.fetch_timeout <= 0:
            raise ValueError(f"fetch_timeout must be positive, got {self.fetch_timeout}")
        if self.font_path is not None:
            self.font_path = Path(self.font_path)

    def resolve_font(self) -> Path:
        if self.font_path is not None:
            return self.font_path
        return find_unicode_font(self.extra_font_candidates + FONT_CANDIDATES)

    @classmethod
    def from_env(cls, **overrides) -> "EditorSettings":
        """Build settings from ``SLIDE_EDITOR_*`` variables; *overrides* win."""
        values = {}
        if os.getenv("SLIDE_EDITOR_FONT"):
            values["font_path"] = Path(os.environ["SLIDE_EDITOR_FONT"])
        if os.getenv("SLIDE_EDITOR_FETCH_TIMEOUT"):
            values["fetch_timeout"] = float(os.environ["SLIDE_EDITOR_FETCH_TIMEOUT"])
        if os.getenv("SLIDE_EDITOR_HISTORY_DEPTH"):
            values["history_depth"] = int(os.environ["SLIDE_EDITOR_HISTORY_DEPTH"])
        if _env_flag("SLIDE_EDITOR_DEBUG"):
            values["debug"] = True
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
