"""Label normalisation used for roster entries and speaker matching."""

from __future__ import annotations

import re

_WHITESPACE = re.compile(r"[\s　]+")


def normalize_label(text: str) -> str:
    """Remove every whitespace character (half and full width) from ``text``."""

    return _WHITESPACE.sub("", text)


__all__ = ["normalize_label"]
