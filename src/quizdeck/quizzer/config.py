"""Configuration loader for quiz sessions."""

from __future__ import annotations

import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Mapping, MutableMapping, Optional, Sequence

from quizdeck.core import config as core_config
from quizdeck.core import workspace as workspace_mod

from .errors import QuizConfigError
from .render import THEMES
from .session import DEFAULT_FEEDBACK_DELAY
from .sources import DEFAULT_EXTENSIONS

CONFIG_FILENAME = "quizdeck.toml"
CONFIG_ENV = "QUIZDECK_CONFIG"
ENV_PREFIX = "QUIZDECK_"
TEMPLATE_RESOURCE = "template.toml"

_DEFAULT_GLYPHS = "unicode"
_DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class QuizConfig:
    """Fully resolved settings for one quiz run."""

    feedback_delay: float = DEFAULT_FEEDBACK_DELAY
    repeat_wrong_feedback: bool = False
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    glyphs: str = _DEFAULT_GLYPHS
    log_level: str = _DEFAULT_LOG_LEVEL


@dataclass(frozen=True)
class ConfigOverrides:
    """CLI-sourced values applied on top of environment and file options."""

    feedback_delay: Optional[float] = None
    extensions: Optional[Sequence[str]] = None
    glyphs: Optional[str] = None
    log_level: Optional[str] = None


@dataclass(frozen=True)
class LoadResult:
    config: QuizConfig
    layout: workspace_mod.WorkspaceLayout
    config_path: Optional[Path]


def load_config(
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[ConfigOverrides] = None,
    env: Optional[Mapping[str, str]] = None,
    workspace_path: Optional[Path] = None,
) -> LoadResult:
    """Resolve settings with precedence CLI > env > TOML file > defaults.

    The config file is optional at its default location; naming one with
    ``config_path`` or ``QUIZDECK_CONFIG`` makes it mandatory.
    """

    overrides = overrides or ConfigOverrides()
    env_map = os.environ if env is None else env

    try:
        layout = workspace_mod.ensure_workspace(env=env_map, path=workspace_path)
    except workspace_mod.WorkspaceError as exc:
        raise QuizConfigError(str(exc)) from exc

    explicit = config_path is not None or bool(
        (env_map.get(CONFIG_ENV) or "").strip()
    )
    requested = _resolve_config_path(
        config_path=config_path,
        env_map=env_map,
        default_path=layout.path_for("config") / CONFIG_FILENAME,
    )

    table = _default_table()
    loaded_path: Optional[Path] = None
    if requested.exists():
        try:
            core_config.merge_defaults(table, core_config.load_toml(requested))
        except core_config.TomlConfigError as exc:
            raise QuizConfigError(str(exc)) from exc
        loaded_path = requested
    elif explicit:
        raise QuizConfigError(f"Config file not found: {requested}")

    session = table["session"]
    delay = _resolve_delay(
        _pick_first(
            overrides.feedback_delay,
            _env(env_map, "FEEDBACK_DELAY"),
            session["feedback_delay"],
        )
    )
    repeat = session["repeat_wrong_feedback"]
    if not isinstance(repeat, bool):
        raise QuizConfigError("session.repeat_wrong_feedback must be a boolean.")

    env_extensions = _env(env_map, "EXTENSIONS")
    extensions = _normalize_extensions(
        _pick_first(
            overrides.extensions,
            env_extensions.replace(",", " ").split() if env_extensions else None,
            table["discovery"]["extensions"],
        )
    )
    glyphs = _resolve_glyphs(
        _pick_first(
            overrides.glyphs, _env(env_map, "GLYPHS"), table["render"]["glyphs"]
        )
    )
    log_level = _resolve_log_level(
        _pick_first(
            overrides.log_level,
            _env(env_map, "LOG_LEVEL"),
            table["logging"]["level"],
        )
    )

    config = QuizConfig(
        feedback_delay=delay,
        repeat_wrong_feedback=repeat,
        extensions=extensions,
        glyphs=glyphs,
        log_level=log_level,
    )
    return LoadResult(config=config, layout=layout, config_path=loaded_path)


def read_template() -> str:
    resource = resources.files("quizdeck.quizzer").joinpath(TEMPLATE_RESOURCE)
    return resource.read_text(encoding="utf-8")


def write_template(path: Path, *, overwrite: bool = False) -> Path:
    try:
        return core_config.write_toml_template(
            path, template=read_template(), overwrite=overwrite
        )
    except core_config.TomlConfigError as exc:
        raise QuizConfigError(str(exc)) from exc


def _default_table() -> MutableMapping[str, MutableMapping[str, object]]:
    return {
        "session": {
            "feedback_delay": DEFAULT_FEEDBACK_DELAY,
            "repeat_wrong_feedback": False,
        },
        "discovery": {"extensions": list(DEFAULT_EXTENSIONS)},
        "render": {"glyphs": _DEFAULT_GLYPHS},
        "logging": {"level": _DEFAULT_LOG_LEVEL},
    }


def _resolve_config_path(
    *,
    config_path: Optional[Path],
    env_map: Mapping[str, str],
    default_path: Path,
) -> Path:
    if config_path is not None:
        return config_path.expanduser()
    env_candidate = (env_map.get(CONFIG_ENV) or "").strip()
    if env_candidate:
        return Path(env_candidate).expanduser()
    return default_path


def _resolve_delay(value: object) -> float:
    if isinstance(value, bool):
        raise QuizConfigError("session.feedback_delay must be a number.")
    try:
        delay = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise QuizConfigError(
            f"session.feedback_delay must be a number, got {value!r}."
        ) from exc
    if delay <= 0:
        raise QuizConfigError("session.feedback_delay must be greater than 0.")
    return delay


def _normalize_extensions(value: object) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        raise QuizConfigError("discovery.extensions must be a list of strings.")
    result: list[str] = []
    for item in value:
        if not isinstance(item, str) or not item.strip().lstrip("."):
            raise QuizConfigError("Extensions must be non-empty strings.")
        normalized = item.strip().lower().lstrip(".")
        if normalized not in result:
            result.append(normalized)
    if not result:
        raise QuizConfigError("At least one extension must be configured.")
    return tuple(result)


def _resolve_glyphs(value: object) -> str:
    name = str(value).strip().lower()
    if name not in THEMES:
        expected = ", ".join(THEMES)
        raise QuizConfigError(
            f"Unknown glyph theme '{value}'. Expected one of: {expected}."
        )
    return name


def _resolve_log_level(value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise QuizConfigError("logging.level must be a non-empty string.")
    return value.strip().upper()


def _env(env_map: Mapping[str, str], key: str) -> Optional[str]:
    raw = env_map.get(f"{ENV_PREFIX}{key}")
    if raw is None:
        return None
    return raw.strip() or None


def _pick_first(*candidates: object) -> object:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None
