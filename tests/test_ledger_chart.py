"""Tests for ledger_chart module."""

from datetime import date

import matplotlib

matplotlib.use("Agg")

import pytest  # noqa: E402

from ledger_chart import DAY_KINDS, ledger_matrix, plot_resource_ledger  # noqa: E402
from planner_config import PlannerConfig  # noqa: E402
from resource_ledger import WorkerDay  # noqa: E402
from scheduler import process  # noqa: E402


@pytest.fixture
def result(make_project, office_calendar):
    tasks = [("A", 1.0, []), ("B", 0.5, []), ("C", 2.0, ["A"])]
    team = {"W": {}, "V": {}}
    project = make_project(tasks, {"A": "W", "B": "W", "C": "V"}, team=team, start=date(2024, 1, 5))
    return process(project, {"office": office_calendar})


def test_ledger_matrix(result):
    matrix, workers = ledger_matrix(result)

    # Fri start: A and B overload W on Friday, C runs Mon-Tue for V
    assert workers == ["V", "W"]
    assert matrix.shape == (2, 5)
    assert matrix[1, 0] == DAY_KINDS.index(WorkerDay.OVERLOADED)
    assert matrix[1, 1] == DAY_KINDS.index(WorkerDay.UNASSIGNED)
    assert matrix[0, 1] == DAY_KINDS.index(WorkerDay.PUB_HOLIDAYS)
    assert matrix[0, 3] == DAY_KINDS.index(WorkerDay.FINE)
    assert (matrix >= 0).all()


def test_plot_resource_ledger(result, tmp_path):
    output = tmp_path / "ledger.png"
    plot_resource_ledger(result, str(output), PlannerConfig(colors={"worker_fine": "00AA00"}))

    assert output.exists()
    assert output.stat().st_size > 0


def test_plot_empty_ledger(make_project, office_calendar, tmp_path, caplog):
    project = make_project([], {})
    result = process(project, {"office": office_calendar})
    output = tmp_path / "ledger.png"

    plot_resource_ledger(result, str(output))

    assert not output.exists()
    assert "Resource ledger is empty" in caplog.text
