"""Length-bucketed score index and multi-word anagram search engine."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable

from models import Entry, SeedResult, SolveOptions, SolveReport
from utils import heuristic_min_length, normalize_token, query_contains, read_wordlist, sanitize

ProgressCallback = Callable[[float], None]

logger = logging.getLogger(__name__)


def _rank_key(entry: Entry) -> tuple[int, str]:
    return (-entry.score, entry.text)


class AnagramSolver:
    """
    Find combinations of dictionary words that use exactly the query's letters.

    ``scores[n]`` maps the text of every known word or word combination with
    ``n`` letters (spaces excluded) to its score. Buckets are filled by
    ``seed`` and then grown in place, shortest first, by ``permute``.
    """

    def __init__(self, query: str, options: SolveOptions | None = None) -> None:
        self.options = options or SolveOptions()
        self.query = normalize_token(
            query,
            normalize_case=self.options.normalize_case,
            strip_non_alphanumerics=self.options.strip_non_alphanumerics,
        )
        self.sorted_query = sanitize(self.query)
        self.max_length = len(self.sorted_query)
        self.scores: list[dict[str, int]] = [{} for _ in range(self.max_length + 1)]

    def query_contains(self, word: str) -> bool:
        """True if ``word``'s letters can all be taken from the query."""
        return query_contains(word, self.sorted_query)

    def seed(self, lines: Iterable[str], source: str = "<lines>") -> SeedResult:
        """Load dictionary words that fit inside the query into their length buckets."""
        result = SeedResult(source=source)

        for raw_line in lines:
            result.total_lines += 1
            word = normalize_token(
                raw_line,
                normalize_case=self.options.normalize_case,
                strip_non_alphanumerics=self.options.strip_non_alphanumerics,
            )
            if len(word) > self.max_length:
                result.rejected_too_long += 1
                continue
            if not self.query_contains(word):
                result.rejected_letters += 1
                continue

            length = len(sanitize(word))
            self.scores[length][word] = length * length
            result.accepted_words += 1

        logger.info(
            "Seeded %d of %d lines from %s (%d too long, %d letter mismatches)",
            result.accepted_words,
            result.total_lines,
            source,
            result.rejected_too_long,
            result.rejected_letters,
        )
        return result

    def seed_file(self, wordlist_path: str | Path) -> SeedResult:
        """
        Seed from a newline-delimited word list.

        An unreadable source is reported in the result rather than raised,
        leaving the index empty but usable.
        """
        try:
            return self.seed(read_wordlist(wordlist_path), source=str(wordlist_path))
        except OSError as exc:
            logger.error("Could not read wordlist %s: %s", wordlist_path, exc)
            return SeedResult(source=str(wordlist_path), source_available=False, error=str(exc))

    def permute(self, length: int, min_length: int, estimate_only: bool = False) -> int:
        """
        Combine shorter buckets into ``scores[length]``.

        Each split pairs a left part of ``s`` letters with a right part of
        ``length - s`` letters, with ``s >= length - s`` so no split is visited
        twice. Returns the number of pairs examined; with ``estimate_only`` the
        pairs are counted but not built.
        """
        iterations = 0
        dest = self.scores[length]
        for left_length in range(length - min_length, min_length - 1, -1):
            right_length = length - left_length
            if right_length > left_length:
                break

            left = self.scores[left_length]
            right = self.scores[right_length]
            if not left or not right:
                continue

            pairs = len(left) * len(right)
            iterations += pairs
            if estimate_only:
                continue

            logger.debug(
                "permute into list[%d] -> list[%d] x list[%d] = %d * %d = %d combinations",
                length,
                left_length,
                right_length,
                len(left),
                len(right),
                pairs,
            )

            # Words are sorted so "cat dog" and "dog cat" land on one key.
            for left_text, left_score in left.items():
                left_words = left_text.split(" ")
                for right_text, right_score in right.items():
                    combined = " ".join(sorted(left_words + right_text.split(" ")))
                    if combined in dest or not self.query_contains(combined):
                        continue
                    dest[combined] = left_score + right_score
        return iterations

    def estimate_min_length(self, max_iterations: int) -> int:
        """
        Pick the smallest minimum sub-word length whose estimated pair count
        stays within ``max_iterations``.

        Estimates use the currently seeded buckets only, so combinations built
        during the solve are not counted.
        """
        min_length = self.max_length - 1
        while min_length > 0:
            iterations = sum(
                self.permute(i, min_length, estimate_only=True) for i in range(self.max_length + 1)
            )
            logger.debug("Estimated iterations for min length %d: %d", min_length, iterations)
            if iterations > max_iterations:
                break
            min_length -= 1
        return min(max(1, min_length + 1), max(1, self.max_length))

    def choose_min_length(self, options: SolveOptions) -> int:
        if options.min_length is not None:
            if options.min_length < 1:
                raise ValueError(f"min_length must be at least 1, got {options.min_length}")
            return options.min_length
        if options.force_all:
            return 1
        if options.auto_min_length:
            if options.max_estimated_iterations < 1:
                raise ValueError("max_estimated_iterations must be positive")
            min_length = self.estimate_min_length(options.max_estimated_iterations)
            logger.info("Automatically choosing minimum length: %d", min_length)
            return min_length
        if options.min_length_slack < 0:
            raise ValueError(f"min_length_slack must not be negative, got {options.min_length_slack}")
        return heuristic_min_length(self.max_length, options.min_length_slack)

    def solve(
        self,
        options: SolveOptions | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> SolveReport:
        """Build combinations up to the full query length and rank the complete anagrams."""
        options = options or self.options
        if options.max_results is not None and options.max_results < 0:
            raise ValueError(f"max_results must not be negative, got {options.max_results}")

        if not self.max_length:
            return SolveReport(
                query=self.query,
                sorted_query=self.sorted_query,
                min_length=0,
                iterations=0,
                candidates=0,
                bucket_sizes=self.bucket_sizes(),
            )

        min_length = self.choose_min_length(options)
        logger.info(
            "Finding anagram for word '%s' (letters [%s]), length range [%d-%d].",
            self.query,
            self.sorted_query,
            min_length,
            self.max_length,
        )

        iterations = 0
        for i in range(self.max_length + 1):
            iterations += self.permute(i, min_length)
            if progress_callback:
                progress_callback((i + 1) / (self.max_length + 1))
        logger.info("Total iterations: %d", iterations)

        final = self.scores[self.max_length]
        answers = [Entry(text, score) for text, score in final.items() if self.query_contains(text)]
        answers.sort(key=_rank_key)
        if options.max_results is not None:
            answers = answers[: options.max_results]
        logger.info("Found %d possible anagrams, %d answers.", len(final), len(answers))

        return SolveReport(
            query=self.query,
            sorted_query=self.sorted_query,
            min_length=min_length,
            iterations=iterations,
            candidates=len(final),
            answers=answers,
            bucket_sizes=self.bucket_sizes(),
        )

    def bucket_sizes(self) -> list[int]:
        return [len(bucket) for bucket in self.scores]

    def dump(self, dump_words: bool = False) -> None:
        """Log the current word list counts per length."""
        logger.info("Current word list counts:")
        for length, bucket in enumerate(self.scores):
            logger.info("* Scores[%d]: %d", length, len(bucket))
            if dump_words:
                for text in sorted(bucket):
                    logger.info("  * %s", text)
