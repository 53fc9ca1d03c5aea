"""
Slide Editor Package

Editing core for slide decks: an immutable document model, linear undo/redo
history, drag/resize geometry, and PDF/PPTX/JSON export.
"""

from .commands import (
    AddElement,
    AddSlide,
    ChangeBackground,
    DeleteSlide,
    MoveSlide,
    RemoveElement,
    RenameTitle,
    ReplaceSlides,
    UpdateElement,
)
from .config import EditorSettings
from .exporter import PresentationExporter
from .geometry import GestureTracker, ResizeDirection
from .history import History, HistoryManager
from .models import (
    ColorBackground,
    EditorState,
    ImageBackground,
    ImageElement,
    Position,
    Presentation,
    Selection,
    Size,
    Slide,
    TextElement,
)
from .page_renderer import PageRenderer
from .pdf_renderer import ExportError, ExportInProgressError, PDFEncoder
from .schema import DocumentValidationError

__all__ = [
    'AddElement', 'AddSlide', 'ChangeBackground', 'DeleteSlide', 'MoveSlide', 'RemoveElement',
    'RenameTitle', 'ReplaceSlides', 'UpdateElement',
    'EditorSettings', 'PresentationExporter', 'GestureTracker', 'ResizeDirection',
    'History', 'HistoryManager',
    'ColorBackground', 'EditorState', 'ImageBackground', 'ImageElement', 'Position', 'Presentation',
    'Selection', 'Size', 'Slide', 'TextElement',
    'PageRenderer', 'ExportError', 'ExportInProgressError', 'PDFEncoder', 'DocumentValidationError',
]
