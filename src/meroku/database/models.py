"""SQLAlchemy models for parsed minutes."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Declarative SQLAlchemy base class."""


class MinutesModel(Base):
    """One transcript, keyed by its source file name."""

    __tablename__ = "minutes"

    source: Mapped[str] = mapped_column(String(255), primary_key=True)
    title: Mapped[str] = mapped_column(String(512), default="")
    working_group: Mapped[str] = mapped_column(String(255), default="")
    working_group_order: Mapped[str] = mapped_column(String(8), default="", index=True)
    working_group_id: Mapped[str] = mapped_column(String(8), default="")
    date: Mapped[str] = mapped_column(String(128), default="")
    venue: Mapped[str] = mapped_column(String(255), default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )

    speakers: Mapped[List["SpeakerModel"]] = relationship(
        back_populates="minutes", cascade="all, delete-orphan"
    )
    speeches: Mapped[List["SpeechModel"]] = relationship(
        back_populates="minutes", cascade="all, delete-orphan", order_by="SpeechModel.sequence_number"
    )


class SpeakerModel(Base):
    """A distinct speaker label of one transcript with its resolution."""

    __tablename__ = "speakers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    minutes_source: Mapped[str] = mapped_column(String(255), ForeignKey("minutes.source"), index=True)
    label: Mapped[str] = mapped_column(String(255))
    resolution_score: Mapped[float] = mapped_column(Float, default=0.0)
    person_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    person_label: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    person_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    person_role: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    person_affiliation: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)

    minutes: Mapped[MinutesModel] = relationship(back_populates="speakers")


class SpeechModel(Base):
    """A speech; utterances are stored newline separated."""

    __tablename__ = "speeches"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    minutes_source: Mapped[str] = mapped_column(String(255), ForeignKey("minutes.source"), index=True)
    sequence_number: Mapped[int] = mapped_column(Integer, index=True)
    speaker_label: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    text: Mapped[str] = mapped_column(Text, default="")

    minutes: Mapped[MinutesModel] = relationship(back_populates="speeches")


__all__ = ["Base", "MinutesModel", "SpeakerModel", "SpeechModel"]
