"""
Data models for the slide editor.

Every model is a frozen dataclass.  Edits never mutate in place: the functions
in :mod:`slide_editor.editor` build new objects and share untouched parts by
reference, which keeps history snapshots cheap.

``to_dict`` / ``from_dict`` convert to and from the JSON document format used
for import, export and saved sessions (camelCase keys, ``type`` tags).
"""
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union


MIN_ELEMENT_SIZE = 10
HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}\Z")
DEFAULT_BACKGROUND_COLOR = "#FFFFFF"


@dataclass(frozen=True)
class Position:
    """Top-left corner of an element in slide pixels (y grows downward)."""
    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Position":
        return cls(x=data["x"], y=data["y"])


@dataclass(frozen=True)
class Size:
    width: float
    height: float

    def to_dict(self) -> Dict[str, float]:
        return {"width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Size":
        return cls(width=data["width"], height=data["height"])


# ---------------------------------------------------------------------------
# Backgrounds
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ColorBackground:
    color_hex: str = DEFAULT_BACKGROUND_COLOR
    kind: str = field(default="color", init=False)

    def to_dict(self) -> Dict[str, str]:
        return {"type": "color", "color": self.color_hex}


@dataclass(frozen=True)
class ImageBackground:
    source: str  # URL, data URI or local path
    kind: str = field(default="image", init=False)

    def to_dict(self) -> Dict[str, str]:
        return {"type": "image", "imageUrl": self.source}


Background = Union[ColorBackground, ImageBackground]


def background_from_dict(data: Dict[str, Any]) -> Background:
    """Build a background variant from its ``type``-tagged dictionary."""
    kind = data.get("type")
    if kind == "color":
        return ColorBackground(color_hex=data["color"])
    if kind == "image":
        return ImageBackground(source=data["imageUrl"])
    raise ValueError(f"Unknown background type: {kind!r}")


# ---------------------------------------------------------------------------
# Elements
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TextElement:
    """
    A single run of text drawn at the element's position.

    No wrapping or rich layout: ``content`` is drawn literally.
    """
    id: str
    position: Position
    size: Size
    content: str
    font_family: str = "Arial"
    font_size: float = 16
    font_color: str = "#000000"
    kind: str = field(default="text", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "text",
            "id": self.id,
            "position": self.position.to_dict(),
            "size": self.size.to_dict(),
            "content": self.content,
            "fontFamily": self.font_family,
            "fontSize": self.font_size,
            "fontColor": self.font_color,
        }


@dataclass(frozen=True)
class ImageElement:
    id: str
    position: Position
    size: Size
    content: str  # URL, data URI or local path
    kind: str = field(default="image", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "image",
            "id": self.id,
            "position": self.position.to_dict(),
            "size": self.size.to_dict(),
            "content": self.content,
        }


Element = Union[TextElement, ImageElement]

# Fields update_element may merge, per element kind
ELEMENT_FIELDS = {
    "text": ("position", "size", "content", "font_family", "font_size", "font_color"),
    "image": ("position", "size", "content"),
}


def element_from_dict(data: Dict[str, Any]) -> Element:
    """Build an element variant from its ``type``-tagged dictionary."""
    kind = data.get("type")
    position = Position.from_dict(data["position"])
    size = Size.from_dict(data["size"])
    if kind == "text":
        return TextElement(
            id=data["id"],
            position=position,
            size=size,
            content=data["content"],
            font_family=data["fontFamily"],
            font_size=data["fontSize"],
            font_color=data["fontColor"],
        )
    if kind == "image":
        return ImageElement(id=data["id"], position=position, size=size, content=data["content"])
    raise ValueError(f"Unknown element type: {kind!r}")


# ---------------------------------------------------------------------------
# Slides & presentation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Slide:
    """
    One slide.  ``elements`` is in z-order: later entries are drawn on top.
    """
    id: str
    background: Background = field(default_factory=ColorBackground)
    elements: Tuple[Element, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "background": self.background.to_dict(),
            "elements": [element.to_dict() for element in self.elements],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Slide":
        return cls(
            id=data["id"],
            background=background_from_dict(data["background"]),
            elements=tuple(element_from_dict(e) for e in data.get("elements", [])),
        )


@dataclass(frozen=True)
class Presentation:
    title: str = ""
    slides: Tuple[Slide, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "slides": [slide.to_dict() for slide in self.slides]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Presentation":
        return cls(
            title=data["title"],
            slides=tuple(Slide.from_dict(s) for s in data.get("slides", [])),
        )


# ---------------------------------------------------------------------------
# Editor state
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Selection:
    """Transient UI selection.  Kept in snapshots but carries no invariant."""
    selected_slide_id: Optional[str] = None
    selected_element_id: Optional[str] = None
    selected_slide_ids: Optional[Tuple[str, ...]] = None
    selected_element_ids: Optional[Tuple[str, ...]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "selectedSlideId": self.selected_slide_id,
            "selectedElementId": self.selected_element_id,
            "selectedSlidesIdList": list(self.selected_slide_ids) if self.selected_slide_ids is not None else None,
            "selectedElementsIdList": list(self.selected_element_ids) if self.selected_element_ids is not None else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Selection":
        slide_ids = data.get("selectedSlidesIdList")
        element_ids = data.get("selectedElementsIdList")
        return cls(
            selected_slide_id=data.get("selectedSlideId"),
            selected_element_id=data.get("selectedElementId"),
            selected_slide_ids=tuple(slide_ids) if slide_ids is not None else None,
            selected_element_ids=tuple(element_ids) if element_ids is not None else None,
        )


@dataclass(frozen=True)
class ModalFlags:
    """Which editor dialogs are open."""
    set_background: bool = False
    add_element: bool = False

    def to_dict(self) -> Dict[str, bool]:
        return {
            "showModalWindowSetBackground": self.set_background,
            "showModalWindowAddElement": self.add_element,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModalFlags":
        return cls(
            set_background=bool(data.get("showModalWindowSetBackground", False)),
            add_element=bool(data.get("showModalWindowAddElement", False)),
        )


@dataclass(frozen=True)
class EditorState:
    presentation: Presentation = field(default_factory=Presentation)
    selection: Optional[Selection] = field(default_factory=Selection)
    show_modal: ModalFlags = field(default_factory=ModalFlags)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "presentation": self.presentation.to_dict(),
            "selection": self.selection.to_dict() if self.selection is not None else None,
            "showModal": self.show_modal.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditorState":
        """
        Build an editor state from a document dictionary.

        The dictionary is trusted; run it through
        :func:`slide_editor.schema.validate_document` first when it comes from
        outside the process.
        """
        selection = data.get("selection")
        return cls(
            presentation=Presentation.from_dict(data["presentation"]),
            selection=Selection.from_dict(selection) if selection is not None else None,
            show_modal=ModalFlags.from_dict(data.get("showModal") or {}),
        )
