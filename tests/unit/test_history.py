"""Test commands and the undo/redo history manager."""

import pytest

from slide_editor import commands
from slide_editor.commands import (
    AddElement,
    AddSlide,
    ChangeBackground,
    DeleteSlide,
    MoveSlide,
    RemoveElement,
    RenameTitle,
)
from slide_editor.editor import new_editor_state
from slide_editor.history import History, HistoryManager
from slide_editor.models import ColorBackground, Position, Size, Slide, TextElement


def hi_text(id_="t1"):
    return TextElement(id=id_, position=Position(10, 10), size=Size(50, 20), content="Hi")


@pytest.fixture
def manager():
    return HistoryManager()


def test_initial_state_is_empty(manager):
    assert manager.present.presentation.slides == ()
    assert not manager.can_undo
    assert not manager.can_redo


def test_edit_pushes_present_and_clears_future(manager):
    before = manager.present
    manager.dispatch(RenameTitle("One"))
    assert manager.history.past == (before,)
    assert manager.history.future == ()
    assert manager.present.presentation.title == "One"


def test_undo_redo_inverse_law(manager):
    start = manager.present
    edits = [
        RenameTitle("Deck"),
        AddSlide(Slide(id="s1")),
        AddElement("s1", hi_text()),
        commands.move_and_resize("s1", "t1", Position(5, 5), Size(60, 30)),
        ChangeBackground("s1", ColorBackground("#112233")),
    ]
    for cmd in edits:
        manager.dispatch(cmd)
    end = manager.present

    for _ in edits:
        manager.undo()
    assert manager.present is start

    for _ in edits:
        manager.redo()
    assert manager.present is end


def test_undo_and_redo_on_empty_stacks_are_noops(manager):
    history = manager.history
    manager.undo()
    manager.redo()
    assert manager.history is history


def test_redo_truncated_by_new_edit(manager):
    manager.dispatch(RenameTitle("A"))
    manager.dispatch(RenameTitle("B"))
    manager.undo()
    assert manager.can_redo
    manager.dispatch(RenameTitle("C"))
    assert manager.history.future == ()
    manager.redo()
    assert manager.present.presentation.title == "C"


def test_load_clears_history_and_is_not_undoable(manager):
    manager.dispatch(RenameTitle("A"))
    manager.undo()
    loaded = new_editor_state("Imported")
    manager.load(loaded)
    assert manager.present is loaded
    assert manager.history.past == ()
    assert manager.history.future == ()
    manager.undo()
    assert manager.present is loaded


def test_max_depth_drops_oldest(manager):
    manager = HistoryManager(max_depth=2)
    for title in ["a", "b", "c", "d"]:
        manager.dispatch(RenameTitle(title))
    assert len(manager.history.past) == 2
    manager.undo()
    manager.undo()
    manager.undo()
    assert manager.present.presentation.title == "b"


def test_negative_max_depth_rejected():
    with pytest.raises(ValueError):
        HistoryManager(max_depth=-1)


def test_observers_receive_new_present(manager):
    seen = []
    unsubscribe = manager.subscribe(seen.append)
    manager.dispatch(RenameTitle("A"))
    manager.undo()
    manager.undo()  # no-op, no notification
    unsubscribe()
    manager.redo()
    assert [s.presentation.title for s in seen] == ["A", new_editor_state().presentation.title]


def test_selection_changes_do_not_touch_history(manager):
    manager.dispatch(AddSlide(Slide(id="s1")))
    past = manager.history.past
    manager.select_element("t1")
    manager.select_slide("s1")
    assert manager.history.past is past
    assert manager.present.selection.selected_slide_id == "s1"


def test_add_slide_selects_it(manager):
    manager.dispatch(AddSlide(Slide(id="s1")))
    manager.dispatch(AddSlide(Slide(id="s2")))
    assert manager.present.selection.selected_slide_id == "s2"


def test_delete_slide_falls_back_to_first_then_none(manager):
    manager.dispatch(AddSlide(Slide(id="s1")))
    manager.dispatch(AddSlide(Slide(id="s2")))
    manager.dispatch(DeleteSlide("s2"))
    assert manager.present.selection.selected_slide_id == "s1"

    manager.dispatch(DeleteSlide("s1"))
    assert len(manager.present.presentation.slides) == 0
    assert manager.present.selection is None


def test_remove_element_clears_element_selection(manager):
    manager.dispatch(AddSlide(Slide(id="s1")))
    manager.dispatch(AddElement("s1", hi_text()))
    manager.select_element("t1")
    manager.dispatch(RemoveElement("s1", "t1"))
    assert manager.present.selection.selected_element_id is None


def test_move_slide_on_single_slide_deck(manager):
    manager.dispatch(AddSlide(Slide(id="s1")))
    doc = manager.present.presentation
    manager.dispatch(MoveSlide(0, 5))
    assert manager.present.presentation is doc


def test_font_helpers_only_touch_text(manager):
    manager.dispatch(AddSlide(Slide(id="s1")))
    manager.dispatch(AddElement("s1", hi_text()))
    manager.dispatch(commands.change_font_family("s1", "t1", "Georgia"))
    manager.dispatch(commands.change_font_size("s1", "t1", 24))
    manager.dispatch(commands.change_font_color("s1", "t1", "#FF0000"))
    manager.dispatch(commands.edit_text("s1", "t1", "Hello"))
    element = manager.present.presentation.slides[0].elements[0]
    assert (element.font_family, element.font_size, element.font_color, element.content) == (
        "Georgia", 24, "#FF0000", "Hello"
    )


def test_history_value_transitions_are_pure():
    history = History()
    edited = history.edit(new_editor_state("x"))
    assert history.past == ()
    assert edited.undo().present is history.present


def test_selection_paths_share_empty_multi_selection(manager):
    manager.dispatch(AddSlide(Slide(id="s1")))
    manager.dispatch(AddSlide(Slide(id="s2")))
    after_add = manager.present.selection
    manager.select_slide("s2")
    assert manager.present.selection == after_add
    manager.dispatch(DeleteSlide("s1"))
    selection = manager.present.selection
    assert (selection.selected_slide_ids, selection.selected_element_ids) == (None, None)
