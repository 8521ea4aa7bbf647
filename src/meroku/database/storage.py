"""Persistence helpers built on SQLAlchemy."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from sqlalchemy import create_engine, delete, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from ..core.types import Minutes
from .models import Base, MinutesModel, SpeakerModel, SpeechModel


@dataclass(slots=True)
class MinutesOverview:
    """Lightweight representation of stored minutes."""

    source: str
    title: str
    working_group_order: str
    working_group_id: str
    speech_count: int
    speaker_count: int
    resolved_count: int


class Storage:
    """Wrapper around SQLAlchemy to store minutes, speakers and speeches."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)

    @contextmanager
    def session(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def ensure_schema(self) -> None:
        Base.metadata.create_all(self._engine)

    def save_minutes(self, minutes: Minutes) -> int:
        """Insert or replace ``minutes``; returns the number of stored speeches."""

        with self.session() as session:
            record = session.get(MinutesModel, minutes.source)
            if record is None:
                record = MinutesModel(source=minutes.source)
                session.add(record)
            record.title = minutes.title
            record.working_group = minutes.working_group
            record.working_group_order = minutes.working_group_order
            record.working_group_id = minutes.working_group_id
            record.date = minutes.date
            record.venue = minutes.venue
            session.flush()

            session.execute(delete(SpeakerModel).where(SpeakerModel.minutes_source == minutes.source))
            session.execute(delete(SpeechModel).where(SpeechModel.minutes_source == minutes.source))
            for speaker in minutes.speakers.values():
                person = speaker.person
                session.add(
                    SpeakerModel(
                        minutes_source=minutes.source,
                        label=speaker.label,
                        resolution_score=speaker.resolution_score,
                        person_id=person.id if person else None,
                        person_label=person.label if person else None,
                        person_name=person.name if person else None,
                        person_role=person.role if person else None,
                        person_affiliation=person.affiliation if person else None,
                    )
                )
            for sequence_number, speech in enumerate(minutes.speeches, start=1):
                session.add(
                    SpeechModel(
                        minutes_source=minutes.source,
                        sequence_number=sequence_number,
                        speaker_label=speech.speaker.label if speech.speaker else None,
                        text="\n".join(speech.utterances),
                    )
                )
            session.flush()
            return len(minutes.speeches)

    def list_minutes(self, limit: int = 100) -> list[MinutesOverview]:
        """Return stored minutes ordered by working group order and source."""

        speech_counts = (
            select(SpeechModel.minutes_source, func.count(SpeechModel.id).label("speech_count"))
            .group_by(SpeechModel.minutes_source)
            .subquery()
        )
        speaker_counts = (
            select(
                SpeakerModel.minutes_source,
                func.count(SpeakerModel.id).label("speaker_count"),
                func.count(SpeakerModel.person_id).label("resolved_count"),
            )
            .group_by(SpeakerModel.minutes_source)
            .subquery()
        )
        with self.session() as session:
            stmt = (
                select(
                    MinutesModel.source,
                    MinutesModel.title,
                    MinutesModel.working_group_order,
                    MinutesModel.working_group_id,
                    speech_counts.c.speech_count,
                    speaker_counts.c.speaker_count,
                    speaker_counts.c.resolved_count,
                )
                .outerjoin(speech_counts, speech_counts.c.minutes_source == MinutesModel.source)
                .outerjoin(speaker_counts, speaker_counts.c.minutes_source == MinutesModel.source)
                .order_by(MinutesModel.working_group_order, MinutesModel.source)
                .limit(limit)
            )
            return [
                MinutesOverview(
                    source=row.source,
                    title=row.title,
                    working_group_order=row.working_group_order,
                    working_group_id=row.working_group_id,
                    speech_count=row.speech_count or 0,
                    speaker_count=row.speaker_count or 0,
                    resolved_count=row.resolved_count or 0,
                )
                for row in session.execute(stmt).all()
            ]

    def dispose(self) -> None:
        """Dispose the underlying SQLAlchemy engine."""

        self._engine.dispose()


def create_storage(database_url: str, *, echo: bool = False) -> Storage:
    engine = create_engine(database_url, echo=echo, future=True)
    storage = Storage(engine)
    storage.ensure_schema()
    return storage


__all__ = ["MinutesOverview", "Storage", "create_storage"]
