"""Utility helpers for letter keys, word lists, config, logging and exports."""

from __future__ import annotations

import csv
import json
import logging
import re
from pathlib import Path
from typing import Any, Iterator

from models import SolveOptions, SolveReport


def _choose_app_dir() -> Path:
    """
    Pick a writable app directory.

    Preferred location is user home, with local workspace fallback when blocked.
    """
    preferred = Path.home() / ".multiword_anagram"
    try:
        preferred.mkdir(parents=True, exist_ok=True)
        return preferred
    except OSError:
        fallback = Path(".multiword_anagram")
        fallback.mkdir(parents=True, exist_ok=True)
        return fallback


APP_DIR = _choose_app_dir()
CONFIG_PATH = APP_DIR / "config.json"
LOG_PATH = APP_DIR / "app.log"

DEFAULT_WORDLIST = Path("data") / "words"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

NON_ALNUM_PATTERN = re.compile(r"[^0-9A-Za-z ]+")


def setup_logging(level: str = "INFO", log_path: Path | None = LOG_PATH) -> None:
    """
    Configure logging once per run.

    Diagnostics go to the app log file by default, or to stderr when
    ``log_path`` is None.
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")
    if log_path is None:
        logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
        return
    Path(log_path).parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(filename=str(log_path), level=numeric_level, format=LOG_FORMAT)


def load_config(path: Path = CONFIG_PATH) -> dict[str, Any]:
    """Load config from the user home config file."""
    if not path.exists():
        return {}
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except Exception:
        logging.exception("Failed to load config from %s", path)
        return {}


def save_config(config: dict[str, Any], path: Path = CONFIG_PATH) -> None:
    """Persist config to disk."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(config, indent=2), encoding="utf-8")
    except Exception:
        logging.exception("Failed to save config to %s", path)


def sanitize(text: str) -> str:
    """Letter multiset key: spaces removed, remaining characters sorted."""
    return "".join(sorted(text.replace(" ", "")))


def normalize_token(token: str, normalize_case: bool, strip_non_alphanumerics: bool) -> str:
    """
    Normalize a dictionary word or query using selected options.

    Steps:
    1) Trim leading/trailing whitespace.
    2) Optionally lowercase.
    3) Optionally strip everything except letters, digits and spaces.
    """
    out = token.strip()
    if normalize_case:
        out = out.lower()
    if strip_non_alphanumerics:
        out = NON_ALNUM_PATTERN.sub("", out)
    return out


def query_contains(candidate: str, sorted_query: str) -> bool:
    """
    Return True if the letters of ``candidate`` are a sub-multiset of ``sorted_query``.

    Both keys are sorted, so a single forward scan of the query with a second
    cursor into the candidate is enough. An empty candidate never matches.
    """
    word = sanitize(candidate)
    if not word:
        return False

    pos = 0
    for letter in sorted_query:
        if letter == word[pos]:
            pos += 1
            if pos == len(word):
                return True
    return False


def heuristic_min_length(query_length: int, slack: int) -> int:
    """Smallest sub-word length worth pairing: half the query minus some slack."""
    return max(1, query_length // 2 - slack)


def read_wordlist(path: str | Path) -> Iterator[str]:
    """Yield word list lines lazily, one per line, without line endings."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Wordlist file not found: {path}")

    with path.open("rb") as handle:
        for raw_line in handle:
            yield raw_line.decode("utf-8", errors="ignore").rstrip("\r\n")


def export_report(
    json_path: Path | None,
    csv_path: Path | None,
    report: SolveReport,
    wordlist_path: str,
    options: SolveOptions,
) -> None:
    """Export ranked answers to JSON and/or CSV."""
    if json_path is not None:
        payload = {
            "generated_at_utc": report.generated_at_utc,
            "wordlist_path": wordlist_path,
            "options": {
                "normalize_case": options.normalize_case,
                "strip_non_alphanumerics": options.strip_non_alphanumerics,
                "force_all": options.force_all,
                "auto_min_length": options.auto_min_length,
                "min_length": options.min_length,
                "min_length_slack": options.min_length_slack,
                "max_results": options.max_results,
            },
            "query": report.query,
            "sorted_query": report.sorted_query,
            "min_length": report.min_length,
            "iterations": report.iterations,
            "candidates": report.candidates,
            "answers": [{"text": entry.text, "score": entry.score} for entry in report.answers],
        }
        Path(json_path).write_text(json.dumps(payload, indent=2), encoding="utf-8")

    if csv_path is not None:
        with Path(csv_path).open("w", newline="", encoding="utf-8") as handle:
            writer = csv.writer(handle)
            writer.writerow(["rank", "text", "score", "word_count"])
            for rank, entry in enumerate(report.answers, start=1):
                writer.writerow([rank, entry.text, entry.score, len(entry.words)])
