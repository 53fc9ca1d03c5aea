"""JSON Schema for editor documents and validation helpers.

Documents are checked here before they reach the history; anything that
fails is rejected with a :class:`DocumentValidationError` and the caller's
state stays as it was.
"""
from __future__ import annotations

from typing import Any, Dict, List

from jsonschema import Draft202012Validator

HEX_COLOR = {"type": "string", "pattern": "^#[0-9A-Fa-f]{6}$"}

POSITION = {
    "type": "object",
    "properties": {"x": {"type": "number"}, "y": {"type": "number"}},
    "required": ["x", "y"],
}

SIZE = {
    "type": "object",
    "properties": {"width": {"type": "number"}, "height": {"type": "number"}},
    "required": ["width", "height"],
}

TEXT_ELEMENT = {
    "type": "object",
    "properties": {
        "id": {"type": "string"},
        "type": {"const": "text"},
        "position": POSITION,
        "size": SIZE,
        "content": {"type": "string"},
        "fontFamily": {"type": "string"},
        "fontSize": {"type": "number", "exclusiveMinimum": 0},
        "fontColor": HEX_COLOR,
    },
    "required": ["id", "type", "position", "size", "content", "fontFamily", "fontSize", "fontColor"],
}

IMAGE_ELEMENT = {
    "type": "object",
    "properties": {
        "id": {"type": "string"},
        "type": {"const": "image"},
        "position": POSITION,
        "size": SIZE,
        "content": {"type": "string"},
    },
    "required": ["id", "type", "position", "size", "content"],
}

BACKGROUND = {
    "oneOf": [
        {
            "type": "object",
            "properties": {"type": {"const": "color"}, "color": HEX_COLOR},
            "required": ["type", "color"],
        },
        {
            "type": "object",
            "properties": {"type": {"const": "image"}, "imageUrl": {"type": "string"}},
            "required": ["type", "imageUrl"],
        },
    ]
}

SLIDE = {
    "type": "object",
    "properties": {
        "id": {"type": "string"},
        "background": BACKGROUND,
        "elements": {"type": "array", "items": {"oneOf": [TEXT_ELEMENT, IMAGE_ELEMENT]}},
    },
    "required": ["id", "background", "elements"],
}

PRESENTATION = {
    "type": "object",
    "properties": {
        "title": {"type": "string"},
        "slides": {"type": "array", "items": SLIDE},
    },
    "required": ["title", "slides"],
}

_NULLABLE_STRING = {"anyOf": [{"type": "string"}, {"type": "null"}]}
_NULLABLE_STRING_LIST = {"anyOf": [{"type": "array", "items": {"type": "string"}}, {"type": "null"}]}

SELECTION = {
    "type": "object",
    "properties": {
        "selectedSlideId": _NULLABLE_STRING,
        "selectedElementId": _NULLABLE_STRING,
        "selectedSlidesIdList": _NULLABLE_STRING_LIST,
        "selectedElementsIdList": _NULLABLE_STRING_LIST,
    },
    "required": ["selectedSlideId", "selectedElementId", "selectedSlidesIdList", "selectedElementsIdList"],
}

SHOW_MODAL = {
    "type": "object",
    "properties": {
        "showModalWindowSetBackground": {"type": "boolean"},
        "showModalWindowAddElement": {"type": "boolean"},
    },
    "required": ["showModalWindowSetBackground", "showModalWindowAddElement"],
}

EDITOR_DOCUMENT_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "Slide editor document",
    "type": "object",
    "properties": {
        "presentation": PRESENTATION,
        "selection": {"anyOf": [SELECTION, {"type": "null"}]},
        "showModal": SHOW_MODAL,
    },
    "required": ["presentation", "selection", "showModal"],
}

_validator = Draft202012Validator(EDITOR_DOCUMENT_SCHEMA)


class DocumentValidationError(ValueError):
    """The document does not match the editor schema (or is not JSON)."""

    def __init__(self, message: str, errors: List[str] = None):
        self.errors = list(errors or [])
        details = "".join(f"\n  {i}. {e}" for i, e in enumerate(self.errors, 1))
        super().__init__(message + details)


def format_path(path) -> str:
    """Render a jsonschema error path as ``$['slides'][0]``."""
    out = "$"
    for part in path:
        out += f"[{part!r}]" if isinstance(part, str) else f"[{part}]"
    return out


def iter_errors(document: Any) -> List[str]:
    """All schema violations in *document*, sorted by location."""
    errors = sorted(_validator.iter_errors(document), key=lambda e: list(map(str, e.path)))
    return [f"path={format_path(e.path)} message={e.message}" for e in errors]


def is_valid(document: Any) -> bool:
    return _validator.is_valid(document)


def validate_document(document: Any) -> None:
    """Raise :class:`DocumentValidationError` unless *document* is a valid editor document."""
    errors = iter_errors(document)
    if errors:
        raise DocumentValidationError("Invalid editor document", errors)
