"""
Pure edit operations on the document model.

Each function takes a :class:`Presentation` (or :class:`EditorState`) and
returns a new one.  They never raise for an unknown slide or element id: the
input object is returned unchanged, so callers can compare with ``is`` to see
whether anything happened.
"""
import dataclasses
import uuid
from typing import Any, Iterable, Optional

from .geometry import fit_within
from .models import (
    ELEMENT_FIELDS,
    Background,
    ColorBackground,
    EditorState,
    Element,
    ImageElement,
    Position,
    Presentation,
    Selection,
    Size,
    Slide,
    TextElement,
)

DEFAULT_TITLE = "Untitled presentation"
DEFAULT_TEXT = "Enter text"
IMAGE_MAX_SIZE = Size(500, 500)
NEW_ELEMENT_POSITION = Position(50, 50)


def new_id() -> str:
    return uuid.uuid4().hex


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

def new_slide() -> Slide:
    """A slide with a fresh id, a white background and no elements."""
    return Slide(id=new_id(), background=ColorBackground("#FFFFFF"), elements=())


def new_text_element(content: str = DEFAULT_TEXT) -> TextElement:
    return TextElement(
        id=new_id(),
        position=NEW_ELEMENT_POSITION,
        size=Size(200, 50),
        content=content,
        font_family="Arial",
        font_size=16,
        font_color="#000000",
    )


def new_image_element(content: str, natural_size: Size) -> ImageElement:
    """An image element sized to its natural size, shrunk to fit 500x500."""
    return ImageElement(
        id=new_id(),
        position=NEW_ELEMENT_POSITION,
        size=fit_within(natural_size, IMAGE_MAX_SIZE),
        content=content,
    )


def new_editor_state(title: str = DEFAULT_TITLE) -> EditorState:
    return EditorState(presentation=Presentation(title=title, slides=()), selection=Selection())


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def find_slide(doc: Presentation, slide_id: str) -> Optional[Slide]:
    for slide in doc.slides:
        if slide.id == slide_id:
            return slide
    return None


def find_element(slide: Slide, element_id: str) -> Optional[Element]:
    for element in slide.elements:
        if element.id == element_id:
            return element
    return None


def _map_slide(doc: Presentation, slide_id: str, edit) -> Presentation:
    """Apply *edit* to the slide with *slide_id*; no-op if absent or unchanged."""
    slide = find_slide(doc, slide_id)
    if slide is None:
        return doc
    updated = edit(slide)
    if updated is slide:
        return doc
    return dataclasses.replace(
        doc, slides=tuple(updated if s.id == slide_id else s for s in doc.slides)
    )


# ---------------------------------------------------------------------------
# Presentation operations
# ---------------------------------------------------------------------------

def rename_title(doc: Presentation, title: str) -> Presentation:
    if doc.title == title:
        return doc
    return dataclasses.replace(doc, title=title)


def add_slide(doc: Presentation, slide: Slide) -> Presentation:
    return dataclasses.replace(doc, slides=doc.slides + (slide,))


def delete_slide(doc: Presentation, slide_id: str) -> Presentation:
    if find_slide(doc, slide_id) is None:
        return doc
    return dataclasses.replace(doc, slides=tuple(s for s in doc.slides if s.id != slide_id))


def move_slide(doc: Presentation, from_index: int, to_index: int) -> Presentation:
    """Move one slide to *to_index*; other slides keep their relative order.

    Indices outside ``[0, len(slides))`` (negative ones included) make this
    a no-op rather than wrapping around.
    """
    count = len(doc.slides)
    if not (0 <= from_index < count and 0 <= to_index < count) or from_index == to_index:
        return doc
    slides = list(doc.slides)
    moved = slides.pop(from_index)
    slides.insert(to_index, moved)
    return dataclasses.replace(doc, slides=tuple(slides))


def replace_slides(doc: Presentation, slides: Iterable[Slide]) -> Presentation:
    """Swap in a whole new slide sequence (drag-and-drop reordering)."""
    return dataclasses.replace(doc, slides=tuple(slides))


def add_element(doc: Presentation, slide_id: str, element: Element) -> Presentation:
    """Append *element* on top of the z-order of the given slide."""
    return _map_slide(
        doc, slide_id, lambda slide: dataclasses.replace(slide, elements=slide.elements + (element,))
    )


def remove_element(doc: Presentation, slide_id: str, element_id: str) -> Presentation:
    def edit(slide: Slide) -> Slide:
        if find_element(slide, element_id) is None:
            return slide
        return dataclasses.replace(
            slide, elements=tuple(e for e in slide.elements if e.id != element_id)
        )

    return _map_slide(doc, slide_id, edit)


def update_element(doc: Presentation, slide_id: str, element_id: str, **fields: Any) -> Presentation:
    """Shallow-merge *fields* into one element.

    Only fields that apply to the element's kind are merged (font fields
    touch text elements only); anything else is ignored.
    """

    def edit(slide: Slide) -> Slide:
        element = find_element(slide, element_id)
        if element is None:
            return slide
        allowed = ELEMENT_FIELDS[element.kind]
        changes = {k: v for k, v in fields.items() if k in allowed and getattr(element, k) != v}
        if not changes:
            return slide
        updated = dataclasses.replace(element, **changes)
        return dataclasses.replace(
            slide, elements=tuple(updated if e.id == element_id else e for e in slide.elements)
        )

    return _map_slide(doc, slide_id, edit)


def change_background(doc: Presentation, slide_id: str, background: Background) -> Presentation:
    def edit(slide: Slide) -> Slide:
        if slide.background == background:
            return slide
        return dataclasses.replace(slide, background=background)

    return _map_slide(doc, slide_id, edit)


# ---------------------------------------------------------------------------
# Selection (editor state only)
# ---------------------------------------------------------------------------

def select_slide(state: EditorState, slide_id: Optional[str]) -> EditorState:
    selection = Selection(
        selected_slide_id=slide_id,
        selected_element_id=None,
        selected_slide_ids=None,
        selected_element_ids=None,
    )
    return dataclasses.replace(state, selection=selection)


def select_element(state: EditorState, element_id: Optional[str]) -> EditorState:
    current = state.selection or Selection()
    return dataclasses.replace(
        state, selection=dataclasses.replace(current, selected_element_id=element_id)
    )
