"""Helpers for resolving export output locations.

Every export writes into an explicit output directory.  A bare file name is
placed inside that directory; a path with directories is used as given.
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

__all__ = ["prepare_output_dir", "resolve_output_path", "build_export_filename"]

DEFAULT_BASENAME = "presentation"
MAX_BASENAME = 120


def prepare_output_dir(output_dir: str | Path) -> Path:
    """Resolve *output_dir* to an absolute path and create it if needed."""
    out_path = Path(output_dir).expanduser().resolve()
    out_path.mkdir(parents=True, exist_ok=True)
    return out_path


def build_export_filename(title: Optional[str], extension: str) -> str:
    """Derive a filesystem-safe file name from a presentation title.

    Letters (any script), digits, ``.``, ``_`` and ``-`` are kept; runs of
    anything else become a single ``-``.  Falls back to ``presentation``.
    """
    base = (title or "").strip()
    base = re.sub(r"[^\w.-]+", "-", base)
    base = base.strip("-.")[:MAX_BASENAME].strip("-.") or DEFAULT_BASENAME
    return f"{base}.{extension.lstrip('.')}"


def resolve_output_path(output_path: str | Path | None, output_dir: Path, default_name: str) -> Path:
    """Return where an export should be written.

    Rules
    -----
    1. ``None`` -> ``output_dir / default_name``.
    2. A bare file name -> placed inside ``output_dir``; the extension of
       *default_name* is appended if missing.
    3. Anything with a directory part (or absolute) is used as given.
    """
    if output_path is None:
        return output_dir / default_name

    path = Path(output_path)
    suffix = Path(default_name).suffix
    if suffix and path.suffix.lower() != suffix.lower():
        path = path.with_name(path.name + suffix)

    if not path.is_absolute() and len(path.parts) == 1:
        path = output_dir / path
    path.parent.mkdir(parents=True, exist_ok=True)
    return path
