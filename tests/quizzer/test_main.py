from __future__ import annotations

import pytest

from fixtures import ARITHMETIC, build_tree, question_json, record
from quizdeck.quizzer import _main
from quizdeck.quizzer.config import CONFIG_FILENAME
from quizdeck.quizzer.errors import TerminalInitFailure
from quizdeck.quizzer.loop import QuizOutcome
from quizdeck.quizzer.session import QuestionResult, SessionState

CAPITAL = record("Capital of Peru?", ["Lima", "Quito"], 0)


def _flat(text: str) -> str:
    # Rich wraps long error lines at the console width.
    return " ".join(text.split())


@pytest.fixture
def captured(monkeypatch):
    """Replace the terminal host; record the session it would have run."""

    calls = {}

    def fake_run(session, channel, *, timers=None, theme=None):
        calls["session"] = session
        calls["theme"] = theme
        calls["timers"] = timers
        return QuizOutcome(
            completed=True,
            results=(QuestionResult(session.current.prompt, 1),)
            if session.current
            else (),
            total_questions=session.total_questions,
        )

    monkeypatch.setattr(_main, "run_in_terminal", fake_run)
    return calls


def test_quiz_main_runs_session_and_prints_summary(
    cards_file, captured, capsys
) -> None:
    exit_code = _main.quiz_main([str(cards_file), "--glyphs", "ascii"])

    assert exit_code == 0
    session = captured["session"]
    assert session.snapshot().state is SessionState.SELECTING
    assert session.total_questions == 1
    assert captured["theme"].unchecked == "[ ]"
    out = capsys.readouterr().out
    assert "You have finished the quiz!" in out
    assert "2+2?" in out


def test_quiz_main_applies_limit_and_delay(tmp_path, captured) -> None:
    deck = tmp_path / "deck.json"
    deck.write_text(question_json(ARITHMETIC, CAPITAL), encoding="utf-8")

    exit_code = _main.quiz_main([str(deck), "--limit", "1", "--delay", "0.25"])

    assert exit_code == 0
    session = captured["session"]
    assert session.total_questions == 1
    assert session.snapshot().question.prompt == "2+2?"


def test_quiz_main_dir_with_several_files_starts_in_file_selection(
    tmp_path, captured
) -> None:
    build_tree(
        tmp_path / "decks",
        {
            "math.json": question_json(ARITHMETIC),
            "geo.json": question_json(CAPITAL),
        },
    )

    exit_code = _main.quiz_main(["--dir", str(tmp_path / "decks")])

    assert exit_code == 0
    snapshot = captured["session"].snapshot()
    assert snapshot.state is SessionState.FILE_SELECTING
    assert [s.display_name for s in snapshot.sources] == ["geo.json", "math.json"]


def test_quiz_main_dir_with_single_file_skips_selection(tmp_path, captured) -> None:
    build_tree(tmp_path / "decks", {"math.json": question_json(ARITHMETIC)})

    _main.quiz_main(["--dir", str(tmp_path / "decks")])

    assert captured["session"].snapshot().state is SessionState.SELECTING


def test_quiz_main_missing_file_reports_error(tmp_path, captured, capsys) -> None:
    exit_code = _main.quiz_main([str(tmp_path / "absent.json")])

    assert exit_code == 1
    assert "session" not in captured
    assert "Unable to load questions" in _flat(capsys.readouterr().err)


def test_quiz_main_empty_file_is_a_load_failure(tmp_path, captured, capsys) -> None:
    deck = tmp_path / "empty.json"
    deck.write_text("[]", encoding="utf-8")

    assert _main.quiz_main([str(deck)]) == 1
    assert "no questions found" in _flat(capsys.readouterr().err)


def test_quiz_main_terminal_failure_exits_one(cards_file, monkeypatch, capsys) -> None:
    def no_terminal(*_args, **_kwargs):
        raise TerminalInitFailure("quizdeck needs an interactive terminal")

    monkeypatch.setattr(_main, "run_in_terminal", no_terminal)

    assert _main.quiz_main([str(cards_file)]) == 1
    assert "interactive terminal" in _flat(capsys.readouterr().err)


def test_quiz_main_rejects_paths_with_dir(tmp_path, cards_file) -> None:
    with pytest.raises(SystemExit) as excinfo:
        _main.quiz_main([str(cards_file), "--dir", str(tmp_path)])
    assert excinfo.value.code == 2


def test_quiz_main_invalid_delay_is_usage_error(cards_file) -> None:
    with pytest.raises(SystemExit) as excinfo:
        _main.quiz_main([str(cards_file), "--delay", "0"])
    assert excinfo.value.code == 2


def test_sources_main_lists_files(tmp_path, capsys) -> None:
    build_tree(
        tmp_path / "decks",
        {"b.json": "[]", "a.jsonl": "", "skip.txt": "x"},
    )

    exit_code = _main.sources_main([str(tmp_path / "decks")])

    assert exit_code == 0
    assert capsys.readouterr().out.splitlines() == ["- a.jsonl", "- b.json"]


def test_sources_main_missing_directory(tmp_path, capsys) -> None:
    assert _main.sources_main([str(tmp_path / "nope")]) == 1
    assert "not a directory" in capsys.readouterr().err


def test_config_init_writes_template_to_workspace(tmp_path, capsys) -> None:
    workspace = tmp_path / "ws"

    assert _main.config_main(["init", "--workspace", str(workspace)]) == 0

    target = workspace / "config" / CONFIG_FILENAME
    assert target.exists()
    assert str(target) in capsys.readouterr().out


def test_config_init_respects_force(tmp_path, capsys) -> None:
    target = tmp_path / "custom.toml"

    assert _main.config_main(["init", "--path", str(target)]) == 0
    assert _main.config_main(["init", "--path", str(target)]) == 1
    assert "already exists" in capsys.readouterr().err
    assert _main.config_main(["init", "--path", str(target), "--force"]) == 0


def test_init_main_reports_created_then_existing(tmp_path, capsys) -> None:
    root = tmp_path / "home"

    assert _main.init_main(["--path", str(root)]) == 0
    first = capsys.readouterr().out
    assert "(created)" in first
    assert (root / "logs").is_dir()

    assert _main.init_main(["--path", str(root)]) == 0
    second = capsys.readouterr().out
    assert "(created)" not in second
