"""Data models for anagram search options, results and seeding metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(slots=True)
class SolveOptions:
    """Normalization and search-bound options used for seeding and solving."""

    normalize_case: bool = False
    strip_non_alphanumerics: bool = False
    force_all: bool = False
    auto_min_length: bool = False
    min_length: int | None = None
    min_length_slack: int = 3
    max_estimated_iterations: int = 100_000
    max_results: int | None = None


@dataclass(slots=True, frozen=True)
class Entry:
    """A dictionary word or space-joined word combination with its score."""

    text: str
    score: int

    @property
    def words(self) -> list[str]:
        return self.text.split(" ")


@dataclass(slots=True)
class SeedResult:
    """Summary returned after seeding the score index from a word source."""

    source: str
    source_available: bool = True
    total_lines: int = 0
    accepted_words: int = 0
    rejected_too_long: int = 0
    rejected_letters: int = 0
    error: str = ""


@dataclass(slots=True)
class SolveReport:
    """Ranked answers plus the diagnostic counters of one solve pass."""

    query: str
    sorted_query: str
    min_length: int
    iterations: int
    candidates: int
    answers: list[Entry] = field(default_factory=list)
    bucket_sizes: list[int] = field(default_factory=list)
    generated_at_utc: str = field(default_factory=lambda: datetime.utcnow().isoformat() + "Z")
