"""Database integration components."""
from __future__ import annotations

from .models import Base, MinutesModel, SpeakerModel, SpeechModel
from .storage import MinutesOverview, Storage, create_storage

__all__ = [
    "Base",
    "MinutesModel",
    "MinutesOverview",
    "SpeakerModel",
    "SpeechModel",
    "Storage",
    "create_storage",
]
