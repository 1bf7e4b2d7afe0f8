import argparse
import logging
import random
import sys
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console

from ..core import configure_logger
from ..core import workspace as workspace_mod
from .config import (
    CONFIG_FILENAME,
    ConfigOverrides,
    QuizConfig,
    load_config,
    write_template,
)
from .errors import DiscoveryFailure, LoadFailure, QuizConfigError, QuizError
from .questions import QuestionSet, load_question_set
from .render import THEMES
from .session import QuizSession, SourceSelection
from .sources import discover_sources
from .summary import render_summary
from .terminal import run_in_terminal
from .timer import EventChannel, TimerDispatcher

DEFAULT_QUESTIONS_FILE = Path("cards.json")


def _arrange(
    questions: QuestionSet, *, shuffle: bool, limit: int
) -> QuestionSet:
    arranged = list(questions)
    if shuffle:
        random.Random().shuffle(arranged)
    if limit > 0:
        arranged = arranged[:limit]
    return tuple(arranged)


def _prepare_session(
    args: argparse.Namespace,
    config: QuizConfig,
    schedule: TimerDispatcher,
    logger: logging.Logger,
) -> QuizSession:
    """Load questions (or discover sources) and build the session.

    With ``--dir`` and more than one eligible file the session starts in
    file selection; otherwise the question set is loaded up front.
    """

    def loader(paths: Sequence[Path]) -> QuestionSet:
        return _arrange(
            load_question_set(paths),
            shuffle=bool(args.shuffle),
            limit=int(args.limit or 0),
        )

    options = dict(
        schedule=schedule,
        feedback_delay=config.feedback_delay,
        repeat_wrong_feedback=config.repeat_wrong_feedback,
        loader=loader,
    )

    if args.dir is not None:
        sources = discover_sources(args.dir, config.extensions)
        if len(sources) > 1:
            logger.info(
                "Starting in file selection", extra={"sources": len(sources)}
            )
            return QuizSession(selection=SourceSelection(sources), **options)
        paths = [sources[0].path]
    else:
        paths = list(args.paths or [DEFAULT_QUESTIONS_FILE])

    questions = loader(paths)
    if not questions:
        raise LoadFailure(paths[0], "no questions found")
    logger.info(
        "Questions loaded",
        extra={"sources": paths, "questions": len(questions)},
    )
    return QuizSession(questions, **options)


def quiz_main(argv: Optional[Sequence[str]] = None) -> int:
    """Run an interactive quiz session in the terminal."""
    parser = _build_quiz_parser()
    args = parser.parse_args(argv)
    if args.paths and args.dir is not None:
        parser.error("question files and --dir are mutually exclusive")

    overrides = ConfigOverrides(
        feedback_delay=args.delay,
        glyphs=args.glyphs,
        log_level=args.log_level,
    )
    try:
        load_result = load_config(
            config_path=args.config,
            overrides=overrides,
            workspace_path=args.workspace,
        )
    except QuizConfigError as exc:
        parser.error(str(exc))
    config = load_result.config

    logger, log_path = configure_logger(
        "quizdeck",
        log_dir=load_result.layout.path_for("logs"),
        level=config.log_level,
        verbose=bool(args.verbose),
    )
    logger.debug("quiz command invoked", extra={"log_path": log_path})

    err = Console(stderr=True)
    channel = EventChannel()
    timers = TimerDispatcher(channel)
    try:
        session = _prepare_session(args, config, timers, logger)
        outcome = run_in_terminal(
            session, channel, timers=timers, theme=THEMES[config.glyphs]
        )
    except QuizError as exc:
        timers.close()
        logger.error("Quiz aborted: %s", exc)
        err.print(f"[bold red]Error:[/] {exc}")
        return 1

    render_summary(Console(), outcome)
    return 0


def sources_main(argv: Optional[Sequence[str]] = None) -> int:
    """List the question files `quiz --dir` would offer."""
    parser = argparse.ArgumentParser(
        prog="quizdeck sources",
        description="List question files discovered under a directory.",
    )
    parser.add_argument("dir", type=Path)
    parser.add_argument(
        "--extensions",
        nargs="+",
        help="File extensions to include (defaults to the configured ones)",
    )
    parser.add_argument("--config", type=Path)
    parser.add_argument("--workspace", type=Path)
    args = parser.parse_args(argv)

    try:
        load_result = load_config(
            config_path=args.config,
            overrides=ConfigOverrides(extensions=args.extensions),
            workspace_path=args.workspace,
        )
    except QuizConfigError as exc:
        parser.error(str(exc))

    try:
        sources = discover_sources(args.dir, load_result.config.extensions)
    except DiscoveryFailure as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    for source in sources:
        print(f"- {source.display_name}")
    return 0


def config_main(argv: Optional[Sequence[str]] = None) -> int:
    """Manage the quizdeck TOML config."""
    parser = argparse.ArgumentParser(
        prog="quizdeck config",
        description="Manage the quizdeck configuration file.",
    )
    sub = parser.add_subparsers(dest="action", required=True)
    sp_init = sub.add_parser("init", help="Write the default config template")
    sp_init.add_argument(
        "--path",
        type=Path,
        help="Destination (defaults to the workspace config directory)",
    )
    sp_init.add_argument("--workspace", type=Path)
    sp_init.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing config file",
    )
    args = parser.parse_args(argv)

    if args.path is not None:
        target = args.path.expanduser()
    else:
        try:
            layout = workspace_mod.ensure_workspace(path=args.workspace)
        except workspace_mod.WorkspaceError as exc:
            print(str(exc), file=sys.stderr)
            return 1
        target = layout.path_for("config") / CONFIG_FILENAME

    try:
        written = write_template(target, overwrite=bool(args.force))
    except QuizConfigError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    print(f"Wrote quizdeck config to {written}")
    return 0


def init_main(argv: Optional[Sequence[str]] = None) -> int:
    """Create the workspace directories."""
    parser = argparse.ArgumentParser(
        prog="quizdeck init",
        description="Create the quizdeck workspace (config and logs).",
    )
    parser.add_argument(
        "--path",
        type=Path,
        help="Workspace root (defaults to QUIZDECK_HOME or ~/.quizdeck)",
    )
    args = parser.parse_args(argv)

    try:
        layout = workspace_mod.ensure_workspace(path=args.path)
    except workspace_mod.WorkspaceError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    status = "created" if layout.created.get("home") else "exists"
    print(f"Workspace ready at {layout.home} ({status})")
    for name, directory in layout.items():
        state = "created" if layout.created.get(name) else "exists"
        print(f"  {name:<6}  {directory} ({state})")
    return 0


def _build_quiz_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="quizdeck quiz",
        description="Answer multiple-choice questions in the terminal",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    p.add_argument(
        "paths",
        nargs="*",
        type=Path,
        help=f"Question files to load (default: {DEFAULT_QUESTIONS_FILE})",
    )
    p.add_argument(
        "--dir",
        type=Path,
        help="Discover question files under this directory and choose",
    )
    p.add_argument("--shuffle", action="store_true")
    p.add_argument(
        "--limit",
        type=int,
        default=0,
        help="Ask at most this many questions (0 = all)",
    )
    p.add_argument(
        "--delay",
        type=float,
        help="Seconds feedback stays on screen",
    )
    p.add_argument("--glyphs", choices=sorted(THEMES))
    p.add_argument("--config", type=Path)
    p.add_argument("--workspace", type=Path)
    p.add_argument("--log-level")
    p.add_argument(
        "--verbose",
        action="store_true",
        help="Also log to stderr",
    )
    return p
