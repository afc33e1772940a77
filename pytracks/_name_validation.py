"""Name validation helpers."""

from __future__ import annotations

import os


def validate_path_component(name, kind):
    """Check that ``name`` can be used as a single directory name."""
    if not isinstance(name, str) or not name:
        raise ValueError(f"{kind} must be a non-empty string")
    if "\x00" in name:
        raise ValueError(f"{kind} must not contain NUL bytes")
    if name in {".", ".."}:
        raise ValueError(f"{kind} cannot be '.' or '..'")
    if os.sep in name or (os.altsep and os.altsep in name):
        raise ValueError(
            f"Invalid {kind} '{name}'. Path separators are not allowed."
        )
