"""Data models for StepSentence."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

@dataclass(frozen=True)
class Cue:
    """One numbered, timed block parsed from an SRT file."""
    index: int
    start_sec: float
    end_sec: float
    text: str

@dataclass
class Segment:
    """A sentence-level span built from one or more consecutive cues."""
    start: float
    end: float
    text: str
    covered_indices: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": self.start,
            "end": self.end,
            "text": self.text,
            "covered_indices": list(self.covered_indices),
        }


class SentenceStatus(str, Enum):
    """Practice state of a sentence. Values match the stored strings."""
    NOT_STARTED = "notStarted"
    RECORDED = "recorded"
    NEEDS_REVIEW = "needsReview"
    APPROVED = "approved"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SentenceStatus":
        """Reads a stored value, falling back to NOT_STARTED for unknown strings."""
        try:
            return cls(value)
        except ValueError:
            return cls.NOT_STARTED


def _new_id() -> str:
    return uuid.uuid4().hex

def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class Sentence:
    """A single practice unit of a project, optionally aligned to the source audio."""
    order: int
    text: str
    status: SentenceStatus = SentenceStatus.NOT_STARTED
    audio_file_name: Optional[str] = None # Recording path relative to the storage root
    start_time_sec: Optional[float] = None
    end_time_sec: Optional[float] = None
    id: str = field(default_factory=_new_id)

    @property
    def is_recorded(self) -> bool:
        return self.audio_file_name is not None

    @property
    def has_timing(self) -> bool:
        return self.start_time_sec is not None and self.end_time_sec is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "order": self.order,
            "text": self.text,
            "status": self.status.value,
            "audio_file_name": self.audio_file_name,
            "start_time_sec": self.start_time_sec,
            "end_time_sec": self.end_time_sec,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Sentence":
        return cls(
            id=data["id"],
            order=int(data["order"]),
            text=data["text"],
            status=SentenceStatus.parse(data.get("status")),
            audio_file_name=data.get("audio_file_name"),
            start_time_sec=data.get("start_time_sec"),
            end_time_sec=data.get("end_time_sec"),
        )


@dataclass
class Project:
    """A titled set of sentences the user practises; owns its sentences."""
    title: str
    full_text: str
    source_audio_file_name: Optional[str] = None # Stored copy of the imported MP3, if any
    sentences: List[Sentence] = field(default_factory=list)
    id: str = field(default_factory=_new_id)
    created_at: str = field(default_factory=_utc_now)

    @property
    def completed_count(self) -> int:
        return sum(1 for s in self.sentences if s.status == SentenceStatus.APPROVED)

    @property
    def total_count(self) -> int:
        return len(self.sentences)

    def ordered_sentences(self) -> List[Sentence]:
        return sorted(self.sentences, key=lambda s: s.order)

    def sentence_at(self, order: int) -> Sentence:
        """
        Returns the sentence with the given order value.

        Raises:
            KeyError: If no sentence has that order.
        """
        for sentence in self.sentences:
            if sentence.order == order:
                return sentence
        raise KeyError(f"Project {self.id} has no sentence with order {order}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "full_text": self.full_text,
            "created_at": self.created_at,
            "source_audio_file_name": self.source_audio_file_name,
            "sentences": [s.to_dict() for s in self.ordered_sentences()],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Project":
        return cls(
            id=data["id"],
            title=data["title"],
            full_text=data.get("full_text", ""),
            created_at=data.get("created_at") or _utc_now(),
            source_audio_file_name=data.get("source_audio_file_name"),
            sentences=[Sentence.from_dict(s) for s in data.get("sentences", [])],
        )
