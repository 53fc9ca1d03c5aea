"""
Linear undo/redo history.

:class:`History` is an immutable past/present/future triple with pure
transitions.  :class:`HistoryManager` owns the current history, applies
dispatched :class:`~slide_editor.commands.Command` objects and notifies
subscribers with the new present state.

Editing after an undo discards the redo stack; there is no branching.
"""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from . import editor
from .commands import Command
from .models import EditorState

logger = logging.getLogger(__name__)

Observer = Callable[[EditorState], None]


@dataclass(frozen=True)
class History:
    present: EditorState = field(default_factory=editor.new_editor_state)
    past: Tuple[EditorState, ...] = ()
    future: Tuple[EditorState, ...] = ()

    @property
    def can_undo(self) -> bool:
        return bool(self.past)

    @property
    def can_redo(self) -> bool:
        return bool(self.future)

    def edit(self, new_present: EditorState, max_depth: Optional[int] = None) -> "History":
        """Record *new_present* as the result of an edit.  Clears the redo stack."""
        past = self.past + (self.present,)
        if max_depth is not None and len(past) > max_depth:
            past = past[len(past) - max_depth:] if max_depth > 0 else ()
        return History(present=new_present, past=past, future=())

    def undo(self) -> "History":
        if not self.past:
            return self
        return History(
            present=self.past[-1],
            past=self.past[:-1],
            future=(self.present,) + self.future,
        )

    def redo(self) -> "History":
        if not self.future:
            return self
        return History(
            present=self.future[0],
            past=self.past + (self.present,),
            future=self.future[1:],
        )

    @staticmethod
    def load(state: EditorState) -> "History":
        """A fresh baseline: *state* with empty past and future."""
        return History(present=state)


class HistoryManager:
    """Single owner of the editor history.

    Parameters
    ----------
    initial
        Starting editor state.  Defaults to an empty, untitled presentation.
    max_depth
        Maximum number of undo steps kept.  ``None`` keeps everything.
    """

    def __init__(self, initial: Optional[EditorState] = None, *, max_depth: Optional[int] = None):
        if max_depth is not None and max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {max_depth}")
        self.max_depth = max_depth
        self._history = History.load(initial if initial is not None else editor.new_editor_state())
        self._observers: List[Observer] = []

    @classmethod
    def from_settings(cls, settings, initial: Optional[EditorState] = None) -> "HistoryManager":
        return cls(initial, max_depth=settings.history_depth)

    @property
    def history(self) -> History:
        return self._history

    @property
    def present(self) -> EditorState:
        return self._history.present

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register *observer*; returns a callable that unregisters it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _set(self, history: History) -> EditorState:
        changed = history is not self._history
        self._history = history
        if changed:
            for observer in list(self._observers):
                observer(history.present)
        return history.present

    def dispatch(self, command: Command) -> EditorState:
        """Apply an edit command and push the previous state onto the undo stack."""
        logger.debug("dispatch %s", type(command).__name__)
        new_present = command.apply(self._history.present)
        return self._set(self._history.edit(new_present, self.max_depth))

    def undo(self) -> EditorState:
        return self._set(self._history.undo())

    def redo(self) -> EditorState:
        return self._set(self._history.redo())

    def load(self, state: EditorState) -> EditorState:
        """Replace the present state and forget all history (not undoable)."""
        logger.debug("load: %d slide(s)", len(state.presentation.slides))
        return self._set(History.load(state))

    def select_slide(self, slide_id: Optional[str]) -> EditorState:
        """Change the selected slide without recording a history entry."""
        return self._set(dataclasses.replace(self._history, present=editor.select_slide(self.present, slide_id)))

    def select_element(self, element_id: Optional[str]) -> EditorState:
        """Change the selected element without recording a history entry."""
        return self._set(
            dataclasses.replace(self._history, present=editor.select_element(self.present, element_id))
        )
