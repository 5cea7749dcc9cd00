import json
from pathlib import Path

import pytest

import cli


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch) -> dict:
    saved: dict = {}
    monkeypatch.setattr(cli, "load_config", lambda: {})
    monkeypatch.setattr(cli, "save_config", lambda config: saved.update(config))
    return saved


def write_wordlist(tmp_path: Path, words: list[str]) -> Path:
    path = tmp_path / "words.txt"
    path.write_text("\n".join(words) + "\n", encoding="utf-8")
    return path


def test_main_prints_ranked_answers(tmp_path: Path, capsys: pytest.CaptureFixture[str], isolated_config: dict) -> None:
    wordlist = write_wordlist(tmp_path, ["dirty", "room", "dorm", "moody"])
    code = cli.main(["dormitory", "-w", str(wordlist), "--all", "--no-progress", "--log-stderr"])

    out = capsys.readouterr().out
    assert code == 0
    assert "Found 1 answers." in out
    assert " * dirty room [score: 41]" in out
    assert isolated_config["last_wordlist_path"] == str(wordlist.resolve())


def test_main_empty_query_is_a_no_op(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["   "]) == 0
    assert "Syntax:" in capsys.readouterr().out


def test_main_missing_wordlist_fails(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(["cat", "-w", str(tmp_path / "nope.txt"), "--no-progress", "--log-stderr"])
    assert code == 1
    assert "Failed to load wordlist" in capsys.readouterr().err


def test_main_rejects_invalid_min_length(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    wordlist = write_wordlist(tmp_path, ["cat"])
    code = cli.main(["cat", "-w", str(wordlist), "--min-length", "0", "--no-progress", "--log-stderr"])
    assert code == 2
    assert "Invalid options" in capsys.readouterr().err


def test_main_exports_results(tmp_path: Path) -> None:
    wordlist = write_wordlist(tmp_path, ["cat", "act", "tac"])
    json_path = tmp_path / "answers.json"
    code = cli.main([
        "cat", "-w", str(wordlist), "--limit", "2", "--export-json", str(json_path), "--log-stderr",
    ])
    assert code == 0
    payload = json.loads(json_path.read_text(encoding="utf-8"))
    assert [answer["text"] for answer in payload["answers"]] == ["act", "cat"]
    assert payload["options"]["max_results"] == 2


def test_options_from_args_maps_flags() -> None:
    args = cli.get_args(["ab", "--auto", "--max-iterations", "50", "--ignore-case", "--slack", "2"], {})
    options = cli.options_from_args(args)
    assert options.auto_min_length is True
    assert options.force_all is False
    assert options.max_estimated_iterations == 50
    assert options.normalize_case is True
    assert options.min_length_slack == 2


def test_get_args_uses_config_defaults() -> None:
    args = cli.get_args(["ab"], {"last_wordlist_path": "/tmp/words", "max_results": 5})
    assert args.wordlist == "/tmp/words"
    assert args.limit == 5
