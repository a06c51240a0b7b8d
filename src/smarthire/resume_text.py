"""Utilities for turning uploaded resume files into plain text."""

from __future__ import annotations

import re
from pathlib import Path

import pymupdf4llm

_BLANK_RUN_RE = re.compile(r"\n{3,}")

SUPPORTED_SUFFIXES: tuple[str, ...] = (".txt", ".pdf")


def extract_resume_text(path: str | Path) -> str:
    """Return the resume text stored at ``path``.

    Parameters
    ----------
    path:
        A ``.txt`` file (read as UTF-8) or a ``.pdf`` file (converted to
        markdown with pymupdf4llm). Runs of blank lines are collapsed to a
        single blank line so prompts stay compact.
    """

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)

    suffix = path.suffix.lower()
    if suffix == ".txt":
        text = path.read_text(encoding="utf-8")
    elif suffix == ".pdf":
        text = pymupdf4llm.to_markdown(str(path))
    else:
        raise ValueError(
            f"Unsupported resume format {suffix or '(none)'}; expected one of {', '.join(SUPPORTED_SUFFIXES)}"
        )

    normalized = text.replace("\r\n", "\n")
    return _BLANK_RUN_RE.sub("\n\n", normalized).strip()


__all__ = ["SUPPORTED_SUFFIXES", "extract_resume_text"]
