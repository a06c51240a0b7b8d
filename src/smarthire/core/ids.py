"""Identifier generation for jobs, candidates, notifications and toasts."""

from __future__ import annotations

import random
import string

_ID_ALPHABET = string.ascii_lowercase + string.digits


def random_id(length: int = 9) -> str:
    """Short base-36 identifier; collisions are unlikely but not excluded."""
    return "".join(random.choices(_ID_ALPHABET, k=length))
