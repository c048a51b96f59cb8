import json
from datetime import UTC, datetime
from io import StringIO

import pytest
from rich.console import Console

from obsctl.core.errors import LocalIoError, PartialBatchFailure
from obsctl.core.models import (
    BatchReport,
    BucketEntry,
    ObjectEntry,
    TaskOutcome,
    TransferTask,
)
from obsctl.core.presenter import BucketView, ObjectView, Presenter, ReportPresenter


@pytest.fixture
def sample_report():
    ok = TransferTask.upload("bucket", "/data/a.txt")
    bad = TransferTask.upload("bucket", "/data/b.txt")
    return BatchReport(
        outcomes=(
            TaskOutcome.success(ok),
            TaskOutcome.failure(bad, LocalIoError("/data/b.txt", "Failed to read file")),
        )
    )


@pytest.fixture
def captured_consoles(mocker):
    out = Console(file=StringIO(), force_terminal=False, width=200, no_color=True)
    err = Console(file=StringIO(), force_terminal=False, width=200, no_color=True)
    mocker.patch("obsctl.core.presenter.console_out", out)
    mocker.patch("obsctl.core.presenter.console_err", err)
    return out, err


def test_object_csv(capsys):
    entries = [
        ObjectEntry("logs/a.txt", 12, datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)),
        ObjectEntry("logs/b.txt", 0, None, "STANDARD"),
    ]
    Presenter(entries, view_class=ObjectView).print_csv()

    output = capsys.readouterr().out
    assert "Key,Last Modified,Size,Storage Class" in output
    assert "logs/a.txt,2024-01-02 03:04:05,12,-" in output
    assert "logs/b.txt,-,0,STANDARD" in output


def test_bucket_json(captured_consoles):
    out, _ = captured_consoles
    buckets = [BucketEntry("alpha", datetime(2024, 5, 1, tzinfo=UTC), "la-south-2")]

    Presenter(buckets, view_class=BucketView).print_json()

    data = json.loads(out.file.getvalue())
    assert data == [
        {
            "name": "alpha",
            "creation_date": "2024-05-01T00:00:00+00:00",
            "location": "la-south-2",
        }
    ]


def test_render_empty_listing(captured_consoles):
    _, err = captured_consoles
    Presenter([], view_class=ObjectView).render("empty")
    assert "No entries found" in err.file.getvalue()


def test_report_table_and_summary(sample_report, captured_consoles):
    out, err = captured_consoles

    ReportPresenter(sample_report).render("Upload Objects")

    table = out.file.getvalue()
    assert "SUCCESS" in table
    assert "FAILURE" in table
    assert "Failed to read file" in table
    assert "1 of 2 tasks failed, 1 succeeded" in err.file.getvalue()


def test_report_json_keeps_positions(sample_report, captured_consoles):
    out, _ = captured_consoles

    ReportPresenter(sample_report).render("Upload", json_output=True)

    data = json.loads(out.file.getvalue())
    assert [row["position"] for row in data] == [1, 2]
    assert data[1]["status"] == "failure"
    assert data[1]["error_type"] == "LocalIoError"
    assert data[1]["task"]["kind"] == "upload"


def test_report_all_succeeded(captured_consoles):
    _, err = captured_consoles
    report = BatchReport(outcomes=(TaskOutcome.success(TransferTask.delete_bucket("b")),))

    ReportPresenter(report).render("Delete Buckets")

    assert "All 1 tasks succeeded" in err.file.getvalue()


def test_raise_for_failures(sample_report):
    with pytest.raises(PartialBatchFailure) as excinfo:
        sample_report.raise_for_failures()

    assert excinfo.value.report is sample_report
    assert "1 of 2 tasks failed" in str(excinfo.value)
