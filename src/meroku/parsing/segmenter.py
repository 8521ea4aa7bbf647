"""State machine that turns transcript fragments into speeches.

Both transcript variants feed their line fragments through
:class:`SpeechSegmenter`. A fragment starting with a ``【label】`` tag opens a
new speech; untagged fragments continue the speech opened last.
"""
from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple
import re

from ..core.types import Speaker, Speech

SPEAKER_TAG = re.compile(r"^【(?P<label>.+?)】")

# A scanned sentence that ends in anything else was cut by a page break.
TERMINAL_CHARACTERS = ("。", "）", "―", "─")

Cleaner = Callable[[str], str]


class SegmenterState(Enum):
    SEEKING_SPEAKER = "seeking-speaker"
    IN_SPEECH = "in-speech"


class SpeechSegmenter:
    """Collect speeches and the label-keyed speaker map of one transcript.

    ``keep_preamble`` keeps untagged text seen before the first speaker tag as
    a speech without speaker; otherwise that text is discarded.
    ``stitch_page_breaks`` buffers utterances that do not end in one of
    :data:`TERMINAL_CHARACTERS` and prefixes them to the next utterance of the
    same speech.
    """

    def __init__(
        self,
        *,
        keep_preamble: bool = True,
        stitch_page_breaks: bool = False,
        cleaner: Optional[Cleaner] = None,
    ) -> None:
        self._keep_preamble = keep_preamble
        self._stitch_page_breaks = stitch_page_breaks
        self._cleaner = cleaner
        self._speakers: Dict[str, Speaker] = {}
        self._speeches: List[Speech] = []
        self._current = Speech()
        self._pending = ""
        self._finished = False
        self.state = SegmenterState.SEEKING_SPEAKER

    def feed(self, fragment: str) -> None:
        """Process one line fragment in document order."""

        if self._finished:
            raise RuntimeError("Segmenter has already been finished")
        text = fragment.strip()
        match = SPEAKER_TAG.match(text)
        if match:
            self._open_speech(match.group("label"))
            text = text[match.end():]
        if self._cleaner:
            text = self._cleaner(text)
        if text:
            self._add_utterance(text)

    def finish(self) -> Tuple[List[Speech], Dict[str, Speaker]]:
        """Close the open speech and return ``(speeches, speakers)``.

        The open speech is appended even if it has no utterances.
        """

        if not self._finished:
            self._flush_pending()
            self._speeches.append(self._current)
            self._finished = True
        return self._speeches, self._speakers

    # --- transitions ----------------------------------------------------
    def _open_speech(self, label: str) -> None:
        self._flush_pending()
        if self._current.utterances:
            self._speeches.append(self._current)
        speaker = self._speakers.get(label)
        if speaker is None:
            speaker = Speaker(label=label)
            self._speakers[label] = speaker
        self._current = Speech(speaker=speaker)
        self.state = SegmenterState.IN_SPEECH

    def _add_utterance(self, text: str) -> None:
        if self.state is SegmenterState.SEEKING_SPEAKER:
            if self._keep_preamble:
                self._current.utterances.append(text)
            return
        if self._stitch_page_breaks:
            if not text.endswith(TERMINAL_CHARACTERS):
                self._pending += text
                return
            text = self._pending + text
            self._pending = ""
        self._current.utterances.append(text)

    def _flush_pending(self) -> None:
        if self._pending:
            self._current.utterances.append(self._pending)
            self._pending = ""


__all__ = ["SPEAKER_TAG", "SegmenterState", "SpeechSegmenter", "TERMINAL_CHARACTERS"]
