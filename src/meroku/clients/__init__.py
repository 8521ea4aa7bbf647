"""HTTP clients used by meroku."""
from __future__ import annotations

from .mext import MextClient, MextClientError, working_group_id_from_url

__all__ = ["MextClient", "MextClientError", "working_group_id_from_url"]
