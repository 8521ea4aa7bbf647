"""Speaker identity resolution."""
from __future__ import annotations

from .resolver import Resolution, ResolutionError, resolve, resolve_speakers, similarity_score

__all__ = ["Resolution", "ResolutionError", "resolve", "resolve_speakers", "similarity_score"]
