"""Tests for ApplyExecutor."""

from kerntune.errors import ApplyFailure
from kerntune.tuning import ApplyExecutor, Change, Subsystem

from .mocks import RecordingUI


def make_changes(count, failing=()):
    attempted = []

    def action(index):
        def run():
            attempted.append(index)
            if index in failing:
                raise ApplyFailure(f"/proc/sys/fake/{index}", "Permission denied")
        return run

    changes = [
        Change(
            subsystem=Subsystem.MEMORY,
            parameter=f"param{i}",
            old_value="0",
            new_value="1",
            path=f"/proc/sys/fake/{i}",
            apply=action(i),
        )
        for i in range(count)
    ]
    return changes, attempted


def test_failure_does_not_stop_remaining_changes():
    changes, attempted = make_changes(5, failing={2})

    report = ApplyExecutor().apply(changes, auto=True)

    assert attempted == [0, 1, 2, 3, 4]
    assert report.counts == (4, 1)
    assert report.failures[0].change.parameter == "param2"
    assert "Permission denied" in report.failures[0].error


def test_each_change_attempted_once_in_order():
    changes, attempted = make_changes(3)
    report = ApplyExecutor().apply(changes, auto=True)

    assert attempted == [0, 1, 2]
    assert [o.change for o in report.outcomes] == changes
    assert report.failed == 0


def test_unexpected_exception_is_recorded():
    def boom():
        raise RuntimeError("unexpected")

    change = Change(Subsystem.CPU, "CPU Governor", "powersave", "performance", "/x", apply=boom)
    report = ApplyExecutor().apply([change], auto=True)

    assert report.counts == (0, 1)
    assert report.outcomes[0].error == "unexpected"


def test_progress_reported_when_interactive():
    changes, _ = make_changes(2, failing={1})
    ui = RecordingUI()

    ApplyExecutor(ui).apply(changes, auto=False)

    assert ui.events[0] == ("start", "param0")
    assert ui.events[1] == ("result", True, None)
    assert ui.events[2] == ("start", "param1")
    assert ui.events[3][:2] == ("result", False)


def test_auto_mode_is_silent():
    changes, _ = make_changes(2)
    ui = RecordingUI()

    report = ApplyExecutor(ui).apply(changes, auto=True)

    assert ui.events == []
    assert report.succeeded == 2


def test_empty_change_list():
    report = ApplyExecutor().apply([], auto=False)
    assert report.counts == (0, 0)
