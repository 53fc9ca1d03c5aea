"""
Typed editing commands.

A command describes one user intent.  ``apply`` turns the current
:class:`EditorState` into the next one using the pure operations in
:mod:`slide_editor.editor`, and keeps the selection consistent with the
edited document.  The :class:`~slide_editor.history.HistoryManager` records
one history entry per dispatched command.
"""
import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from . import editor
from .models import Background, EditorState, Element, Position, Selection, Size, Slide


def _with_presentation(state: EditorState, presentation) -> EditorState:
    if presentation is state.presentation:
        return state
    return dataclasses.replace(state, presentation=presentation)


class Command:
    """Base class for history-worthy edits."""

    def apply(self, state: EditorState) -> EditorState:
        raise NotImplementedError


@dataclass(frozen=True)
class RenameTitle(Command):
    title: str

    def apply(self, state):
        return _with_presentation(state, editor.rename_title(state.presentation, self.title))


@dataclass(frozen=True)
class AddSlide(Command):
    """Append *slide* and select it.  Defaults to a new blank slide."""
    slide: Slide = field(default_factory=editor.new_slide)

    def apply(self, state):
        state = _with_presentation(state, editor.add_slide(state.presentation, self.slide))
        selection = dataclasses.replace(
            state.selection or Selection(),
            selected_slide_id=self.slide.id,
            selected_element_id=None,
            selected_slide_ids=None,
            selected_element_ids=None,
        )
        return dataclasses.replace(state, selection=selection)


@dataclass(frozen=True)
class DeleteSlide(Command):
    """Delete a slide.  Selection falls back to the first remaining slide."""
    slide_id: str

    def apply(self, state):
        presentation = editor.delete_slide(state.presentation, self.slide_id)
        if presentation is state.presentation:
            return state
        if presentation.slides:
            selection = dataclasses.replace(
                state.selection or Selection(),
                selected_slide_id=presentation.slides[0].id,
                selected_element_id=None,
                selected_slide_ids=None,
                selected_element_ids=None,
            )
        else:
            selection = None
        return dataclasses.replace(state, presentation=presentation, selection=selection)


@dataclass(frozen=True)
class MoveSlide(Command):
    from_index: int
    to_index: int

    def apply(self, state):
        return _with_presentation(
            state, editor.move_slide(state.presentation, self.from_index, self.to_index)
        )


@dataclass(frozen=True)
class ReplaceSlides(Command):
    slides: Tuple[Slide, ...]

    def apply(self, state):
        return _with_presentation(state, editor.replace_slides(state.presentation, self.slides))


@dataclass(frozen=True)
class AddElement(Command):
    slide_id: str
    element: Element

    def apply(self, state):
        return _with_presentation(
            state, editor.add_element(state.presentation, self.slide_id, self.element)
        )


@dataclass(frozen=True)
class RemoveElement(Command):
    slide_id: str
    element_id: str

    def apply(self, state):
        new_state = _with_presentation(
            state, editor.remove_element(state.presentation, self.slide_id, self.element_id)
        )
        selection = new_state.selection
        if new_state is not state and selection and selection.selected_element_id == self.element_id:
            new_state = dataclasses.replace(
                new_state, selection=dataclasses.replace(selection, selected_element_id=None)
            )
        return new_state


@dataclass(frozen=True)
class UpdateElement(Command):
    """Merge ``changes`` (position, size, content, font_*) into one element."""
    slide_id: str
    element_id: str
    changes: Dict[str, Any] = field(default_factory=dict)

    def apply(self, state):
        return _with_presentation(
            state,
            editor.update_element(state.presentation, self.slide_id, self.element_id, **self.changes),
        )


def move_and_resize(slide_id: str, element_id: str, position: Position, size: Size) -> UpdateElement:
    """The single update issued when a drag/resize gesture ends."""
    return UpdateElement(slide_id, element_id, {"position": position, "size": size})


def change_font_family(slide_id: str, element_id: str, font_family: str) -> UpdateElement:
    return UpdateElement(slide_id, element_id, {"font_family": font_family})


def change_font_size(slide_id: str, element_id: str, font_size: float) -> UpdateElement:
    return UpdateElement(slide_id, element_id, {"font_size": font_size})


def change_font_color(slide_id: str, element_id: str, font_color: str) -> UpdateElement:
    return UpdateElement(slide_id, element_id, {"font_color": font_color})


def edit_text(slide_id: str, element_id: str, content: str) -> UpdateElement:
    return UpdateElement(slide_id, element_id, {"content": content})


@dataclass(frozen=True)
class ChangeBackground(Command):
    slide_id: str
    background: Background

    def apply(self, state):
        return _with_presentation(
            state, editor.change_background(state.presentation, self.slide_id, self.background)
        )
