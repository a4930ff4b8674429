"""Live per-submission indicators built on rich.progress."""

from typing import Optional

from rich.console import Console
from rich.progress import Progress, ProgressColumn, Task, TextColumn
from rich.text import Text

from ..client.models import SubmissionRecord
from ..utils.terminal import format_result_color, pad_markup


SPINNER_FRAMES = "⠁⠂⠄⡀⢀⠠⠐⠈"
BAR_WIDTH = 30


def render_bar(completed: int, total: int, width: int = BAR_WIDTH) -> str:
    if total <= 0 or completed >= total:
        return "=" * width
    filled = width * completed // total
    return "=" * filled + ">" + "." * (width - filled - 1)


def submission_prefix(record: SubmissionRecord) -> str:
    submitted = record.submitted_at.astimezone().strftime("%Y-%m-%d %H:%M:%S")
    return f"{submitted} | {record.problem[:20]:20} |"


def final_message(record: SubmissionRecord) -> str:
    """Markup of the line printed once a submission is judged."""
    code = record.status.outcome
    stat = pad_markup(
        f"{format_result_color(code, code.long_label)} ({record.score})", 30
    )
    if record.run_time is not None and record.memory is not None:
        return f"{stat} | {record.run_time:>7} | {record.memory}"
    return stat


class StatusColumn(ProgressColumn):
    """Spinner while waiting, `[===>...] c/t` bar while judging."""

    def render(self, task: Task) -> Text:
        fields = task.fields
        message = Text.from_markup(fields.get("message", ""))

        if fields.get("mode") == "bar":
            completed, total = fields["current"], fields["count"]
            return Text.assemble(
                "[",
                (render_bar(completed, total), "cyan"),
                f"] {completed:>2}/{total:<2} ",
                message,
            )

        frame = SPINNER_FRAMES[fields.get("frame", 0) % len(SPINNER_FRAMES)]
        return Text.assemble((frame, "cyan"), " ", message)


class Indicator:
    """Handle of one submission's live line."""

    def __init__(self, progress: Progress, prefix: str):
        self._progress = progress
        self.prefix = prefix
        self.live = True
        self.frame = 0
        self.task_id = progress.add_task(
            prefix, prefix=prefix, mode="spinner", message="", frame=0
        )

    def wait(self, message: str) -> None:
        self._progress.update(self.task_id, mode="spinner", message=message)

    def progress(self, completed: int, total: int, message: str = "") -> None:
        self._progress.update(
            self.task_id,
            mode="bar",
            current=completed,
            count=total,
            message=message,
        )

    def tick(self) -> None:
        self.frame += 1
        self._progress.update(self.task_id, frame=self.frame)

    def finish(self, message: str) -> None:
        """Replace the live line with a permanent one."""
        if not self.live:
            return
        self.live = False
        self._progress.remove_task(self.task_id)
        self._progress.console.print(
            Text.assemble(self.prefix, " ", Text.from_markup(message))
        )


class LiveDisplay:
    """Container of indicators; redrawn only when refresh() is called."""

    def __init__(self, console: Optional[Console] = None):
        self.progress = Progress(
            TextColumn("{task.fields[prefix]}", markup=False),
            StatusColumn(),
            console=console,
            auto_refresh=False,
        )

    def indicator(self, prefix: str) -> Indicator:
        return Indicator(self.progress, prefix)

    def refresh(self) -> None:
        self.progress.refresh()

    def __enter__(self) -> "LiveDisplay":
        self.progress.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.progress.stop()
