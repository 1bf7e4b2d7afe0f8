from __future__ import annotations

import pytest

from quizdeck.quizzer import config as cfg
from quizdeck.quizzer.errors import QuizConfigError


def test_load_config_defaults_use_workspace(tmp_path) -> None:
    workspace_root = tmp_path / "workspace"

    result = cfg.load_config(env={}, workspace_path=workspace_root)

    assert result.layout.home == workspace_root.resolve()
    assert result.config_path is None
    assert result.config == cfg.QuizConfig()
    assert result.config.feedback_delay == 1.0
    assert result.config.extensions == ("json", "jsonl")
    assert result.config.glyphs == "unicode"
    assert result.config.log_level == "INFO"


def test_load_config_reads_file(tmp_path) -> None:
    workspace_root = tmp_path / "ws"
    config_file = workspace_root / "config" / cfg.CONFIG_FILENAME
    config_file.parent.mkdir(parents=True)
    config_file.write_text(
        """
        [session]
        feedback_delay = 2
        repeat_wrong_feedback = true

        [discovery]
        extensions = ["JSON", ".json", "quiz"]

        [render]
        glyphs = "ascii"

        [logging]
        level = "debug"
        """.strip()
        + "\n",
        encoding="utf-8",
    )

    result = cfg.load_config(env={}, workspace_path=workspace_root)

    assert result.config_path == config_file
    assert result.config.feedback_delay == 2.0
    assert result.config.repeat_wrong_feedback is True
    assert result.config.extensions == ("json", "quiz")
    assert result.config.glyphs == "ascii"
    assert result.config.log_level == "DEBUG"


def test_precedence_cli_over_env_over_file(tmp_path) -> None:
    config_file = tmp_path / "custom.toml"
    config_file.write_text(
        '[session]\nfeedback_delay = 3.0\n[render]\nglyphs = "nerd"\n',
        encoding="utf-8",
    )
    env = {
        "QUIZDECK_FEEDBACK_DELAY": "0.5",
        "QUIZDECK_GLYPHS": "ascii",
        "QUIZDECK_EXTENSIONS": "yaml, json",
    }

    result = cfg.load_config(
        config_path=config_file,
        env=env,
        workspace_path=tmp_path / "ws",
        overrides=cfg.ConfigOverrides(feedback_delay=4.0),
    )

    assert result.config.feedback_delay == 4.0
    assert result.config.glyphs == "ascii"
    assert result.config.extensions == ("yaml", "json")


def test_env_config_path_must_exist(tmp_path) -> None:
    env = {cfg.CONFIG_ENV: str(tmp_path / "missing.toml")}

    with pytest.raises(QuizConfigError, match="not found"):
        cfg.load_config(env=env, workspace_path=tmp_path / "ws")


@pytest.mark.parametrize(
    "body, fragment",
    [
        ("[session]\nunknown = 1\n", "Unknown configuration key"),
        ("[session]\nfeedback_delay = 0\n", "greater than 0"),
        ('[session]\nfeedback_delay = "soon"\n', "must be a number"),
        ('[session]\nrepeat_wrong_feedback = "yes"\n', "boolean"),
        ('[render]\nglyphs = "emoji"\n', "Unknown glyph theme"),
        ("[discovery]\nextensions = []\n", "At least one extension"),
        ("session = 1\n", "Expected table"),
        ("[session\n", "Invalid TOML"),
    ],
)
def test_invalid_config_raises(tmp_path, body, fragment) -> None:
    config_file = tmp_path / "bad.toml"
    config_file.write_text(body, encoding="utf-8")

    with pytest.raises(QuizConfigError, match=fragment):
        cfg.load_config(
            config_path=config_file, env={}, workspace_path=tmp_path / "ws"
        )


def test_write_template_round_trips(tmp_path) -> None:
    target = tmp_path / "out" / cfg.CONFIG_FILENAME

    written = cfg.write_template(target)
    result = cfg.load_config(
        config_path=written, env={}, workspace_path=tmp_path / "ws"
    )

    assert result.config == cfg.QuizConfig()
    with pytest.raises(QuizConfigError, match="already exists"):
        cfg.write_template(target)
    cfg.write_template(target, overwrite=True)
