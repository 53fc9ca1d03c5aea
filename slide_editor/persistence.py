"""Reading and writing editor documents as JSON.

Every load goes through :func:`slide_editor.schema.validate_document`; a
document that fails never reaches the history.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Union

from .history import HistoryManager
from .models import EditorState
from .schema import DocumentValidationError, validate_document

logger = logging.getLogger(__name__)

DEFAULT_JSON_NAME = "presentation.json"


def dumps_state(state: EditorState, *, indent: int = None) -> str:
    return json.dumps(state.to_dict(), ensure_ascii=False, indent=indent)


def loads_state(text: Union[str, bytes]) -> EditorState:
    """Parse and validate a JSON document (text, or bytes in a JSON encoding).

    Raises:
        DocumentValidationError: If the text is not JSON or fails the schema
    """
    try:
        document = json.loads(text)
    except UnicodeDecodeError as exc:
        raise DocumentValidationError(f"Document is not decodable as JSON text: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise DocumentValidationError(f"Document is not valid JSON: {exc}") from exc
    validate_document(document)
    return EditorState.from_dict(document)


def save_state_file(state: EditorState, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps_state(state), encoding="utf-8")
    logger.debug("Saved editor state to %s", path)
    return path


def load_state_file(path: Union[str, Path]) -> EditorState:
    path = Path(path)
    return loads_state(path.read_bytes())


def import_into(manager: HistoryManager, path: Union[str, Path]) -> bool:
    """Load *path* into *manager* as a new baseline.

    Returns False (and leaves the manager untouched) if the file is not a
    valid editor document.
    """
    try:
        state = load_state_file(path)
    except DocumentValidationError as exc:
        logger.error("Invalid editor data in %s: %s", path, exc)
        return False
    manager.load(state)
    logger.info("Imported %s (%d slides)", path, len(state.presentation.slides))
    return True
