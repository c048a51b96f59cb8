import csv
import sys
from collections.abc import Sequence
from enum import StrEnum
from typing import Any, Protocol

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from obsctl.core.models import BatchReport, BucketEntry, ObjectEntry, TaskOutcome

console_out = Console()
console_err = Console(stderr=True)


class OutcomeStyle(StrEnum):
    success = "green"
    failure = "red"
    cancelled = "yellow"


def colorize(text: str, style: str) -> str:
    return f"[{style}]{text}[/{style}]"


def _format_timestamp(value: Any) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S") if value else "-"


class ViewProtocol(Protocol):
    @classmethod
    def get_headers(cls) -> list[str]: ...

    @classmethod
    def format_row(cls, item: Any) -> list[str]: ...

    @classmethod
    def format_csv_row(cls, item: Any) -> list[str]: ...

    @classmethod
    def to_dict(cls, item: Any) -> dict[str, Any]: ...


class BucketView:
    @classmethod
    def get_headers(cls) -> list[str]:
        return ["Name", "Created At", "Location"]

    @classmethod
    def format_row(cls, item: BucketEntry) -> list[str]:
        return [item.name, _format_timestamp(item.creation_date), item.location or "-"]

    @classmethod
    def format_csv_row(cls, item: BucketEntry) -> list[str]:
        return cls.format_row(item)

    @classmethod
    def to_dict(cls, item: BucketEntry) -> dict[str, Any]:
        return item.to_dict()


class ObjectView:
    @classmethod
    def get_headers(cls) -> list[str]:
        return ["Key", "Last Modified", "Size", "Storage Class"]

    @classmethod
    def format_row(cls, item: ObjectEntry) -> list[str]:
        return [
            item.key,
            _format_timestamp(item.last_modified),
            str(item.size),
            item.storage_class or "-",
        ]

    @classmethod
    def format_csv_row(cls, item: ObjectEntry) -> list[str]:
        return cls.format_row(item)

    @classmethod
    def to_dict(cls, item: ObjectEntry) -> dict[str, Any]:
        return item.to_dict()


class OutcomeView:
    @classmethod
    def get_headers(cls) -> list[str]:
        return ["#", "Task", "Source", "Target", "Status", "Reason"]

    @classmethod
    def format_row(cls, item: tuple[int, TaskOutcome]) -> list[str]:
        position, outcome = item
        style = OutcomeStyle[outcome.status.value]
        return [
            str(position),
            str(outcome.task.kind),
            escape(outcome.task.source),
            escape(outcome.task.target),
            colorize(outcome.status.upper(), style),
            escape(outcome.reason or "-"),
        ]

    @classmethod
    def format_csv_row(cls, item: tuple[int, TaskOutcome]) -> list[str]:
        position, outcome = item
        return [
            str(position),
            str(outcome.task.kind),
            outcome.task.source,
            outcome.task.target,
            outcome.status.upper(),
            outcome.reason or "",
        ]

    @classmethod
    def to_dict(cls, item: tuple[int, TaskOutcome]) -> dict[str, Any]:
        position, outcome = item
        return {"position": position, **outcome.to_dict()}


class Presenter:
    def __init__(self, items: Sequence[Any], view_class: type[ViewProtocol]):
        self.items = items
        self.view_class = view_class

    def print_json(self):
        console_out.print_json(data=[self.view_class.to_dict(i) for i in self.items])

    def print_csv(self):
        writer = csv.writer(sys.stdout)
        writer.writerow(self.view_class.get_headers())

        for item in self.items:
            writer.writerow(self.view_class.format_csv_row(item))

    def print_table(self, title: str):
        table = Table(title=title, show_lines=False)

        for header in self.view_class.get_headers():
            table.add_column(header)

        for item in self.items:
            table.add_row(*self.view_class.format_row(item))

        console_out.print(table)

    def render(self, title: str, json_output: bool = False, csv_output: bool = False):
        if json_output:
            self.print_json()
        elif csv_output:
            self.print_csv()
        elif self.items:
            self.print_table(title)
        else:
            console_err.print("[bold blue]No entries found[/bold blue]")


class ReportPresenter(Presenter):
    def __init__(self, report: BatchReport):
        super().__init__(
            list(enumerate(report.outcomes, start=1)), view_class=OutcomeView
        )
        self.report = report

    def render(self, title: str, json_output: bool = False, csv_output: bool = False):
        super().render(title, json_output=json_output, csv_output=csv_output)
        self._print_summary()

    def _print_summary(self):
        total = len(self.report.outcomes)
        if self.report.interrupted:
            console_err.print(
                "\n[bold yellow]Interrupted: tasks not yet started were cancelled."
                "[/bold yellow]"
            )
        if self.report.has_failures:
            console_err.print(
                f"\n[bold red]{self.report.failures} of {total} tasks failed, "
                f"{self.report.successes} succeeded.[/bold red]"
            )
        else:
            console_err.print(f"\n[bold green]All {total} tasks succeeded.[/bold green]")
