"""Rich rendering of the end-of-quiz banner and attempt table."""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .loop import QuizOutcome

FINISHED_BANNER = "You have finished the quiz!"
QUIT_BANNER = "Quiz ended early."


def render_summary(console: Console, outcome: QuizOutcome) -> None:
    if not outcome.completed:
        console.print(Text(QUIT_BANNER, style="bold yellow"))
        if not outcome.results:
            return
    else:
        console.print(Text(FINISHED_BANNER, style="bold green"))

    overview = Table(show_header=False, box=box.MINIMAL_DOUBLE_HEAD, expand=False)
    overview.add_column("Metric", style="bold")
    overview.add_column("Value", justify="right")
    overview.add_row("Questions", str(outcome.total_questions))
    overview.add_row("Answered", str(len(outcome.results)))
    overview.add_row("First try", str(outcome.first_try_correct))
    overview.add_row("Wrong attempts", str(outcome.wrong_attempts))
    console.print(overview)

    missed = [
        (idx, result)
        for idx, result in enumerate(outcome.results, start=1)
        if not result.first_try
    ]
    if not missed:
        return
    table = Table(title="Needed another try", box=box.SIMPLE, expand=True)
    table.add_column("#", justify="right")
    table.add_column("Question", overflow="fold")
    table.add_column("Wrong", justify="right", style="red")
    for idx, result in missed:
        table.add_row(str(idx), result.prompt, str(result.wrong_attempts))
    console.print(table)
