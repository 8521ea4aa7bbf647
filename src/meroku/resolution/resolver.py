"""Match transcript speaker labels against a working group roster."""
from __future__ import annotations

from typing import List, NamedTuple, Optional
import logging

from rapidfuzz.distance import JaroWinkler

from ..core.types import MemberList, Minutes, Person, Similarity

LOGGER = logging.getLogger(__name__)


class ResolutionError(LookupError):
    """No roster entry could be matched to a speaker label."""

    def __init__(self, label: str) -> None:
        super().__init__(f"resolution failed for label {label!r}")
        self.label = label


class Resolution(NamedTuple):
    person: Optional[Person]
    similarities: List[Similarity]
    error: Optional[ResolutionError]


def similarity_score(candidate_label: str, raw_label: str) -> float:
    """Jaro-Winkler similarity, or 0.0 when the leading characters differ.

    Speaker tags start with the surname, so a different first character is
    taken as a certain mismatch. Labels that put the given name first are
    missed by this rule.
    """

    if not candidate_label or not raw_label or candidate_label[0] != raw_label[0]:
        return 0.0
    return JaroWinkler.similarity(candidate_label, raw_label)


def resolve(member_list: MemberList, raw_label: str) -> Resolution:
    """Find the roster entry that best matches ``raw_label``.

    Returns the best person, every candidate's similarity in descending score
    order (ties keep roster order) and a :class:`ResolutionError` when the
    roster is empty or no candidate scores above zero.
    """

    similarities = [
        Similarity(target=member, score=similarity_score(member.normalized_label(), raw_label))
        for member in member_list.members
    ]
    similarities = sorted(similarities, key=lambda similarity: similarity.score, reverse=True)

    if not similarities or similarities[0].score <= 0.0:
        return Resolution(None, similarities, ResolutionError(raw_label))
    return Resolution(similarities[0].target, similarities, None)


def resolve_speakers(minutes: Minutes, member_list: MemberList) -> List[ResolutionError]:
    """Attach roster entries to the speakers of ``minutes``.

    Unresolved speakers keep score 0 and no person. The failures are logged
    and returned.
    """

    failures: List[ResolutionError] = []
    for speaker in minutes.speakers.values():
        person, similarities, error = resolve(member_list, speaker.label)
        if error is not None:
            LOGGER.warning("%s (%s)", error, minutes.source)
            failures.append(error)
            continue
        speaker.person = person
        speaker.resolution_score = similarities[0].score
        LOGGER.info("Resolved speaker %s -> %s (%.3f)", speaker.label, person.id, speaker.resolution_score)
    return failures


__all__ = ["Resolution", "ResolutionError", "resolve", "resolve_speakers", "similarity_score"]
