"""Text normalization shared by matching, folders and views."""

from __future__ import annotations

import re

_WHITESPACE = re.compile(r"\s+")
_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")
_UNSAFE_NAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


def normalize_text(value: object) -> str:
    """Collapse whitespace, trim and lowercase."""

    if value is None:
        return ""
    return _WHITESPACE.sub(" ", str(value)).strip().lower()


def normalize_segment(value: str) -> str:
    """Folder-safe taxonomy segment: every non-alphanumeric character removed."""

    return _NON_ALNUM.sub("", value)


def sanitize_label(value: str) -> str:
    """Diagram/file-system safe view label."""

    cleaned = _UNSAFE_NAME_CHARS.sub(" ", value)
    return _WHITESPACE.sub(" ", cleaned).strip()


def split_labels(value: str, delimiter: str) -> tuple[str, ...]:
    """Split a delimited cell into trimmed, non-empty, de-duplicated parts."""

    parts = (part.strip() for part in value.split(delimiter))
    return tuple(dict.fromkeys(part for part in parts if part))
