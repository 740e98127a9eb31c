"""Unit tests for logging setup."""
import pytest
from types import SimpleNamespace

from ivis_data.logger import LogDeduplicationFilter, logger, logger_manager


def make_record(path: str, line: int, level_no: int = 10) -> dict:
    return {"file": SimpleNamespace(path=path), "line": line, "level": SimpleNamespace(no=level_no)}


def test_dedup_suppresses_same_location():
    dedup = LogDeduplicationFilter(max_history=5, time_threshold_seconds=60)

    assert dedup(make_record("/a.py", 10)) is True
    assert dedup(make_record("/a.py", 10)) is False
    assert dedup(make_record("/a.py", 11)) is True
    assert dedup(make_record("/b.py", 10)) is True


def test_dedup_allows_after_threshold():
    dedup = LogDeduplicationFilter(max_history=5, time_threshold_seconds=0)

    assert dedup(make_record("/a.py", 10)) is True
    assert dedup(make_record("/a.py", 10)) is True


def test_dedup_history_is_bounded():
    dedup = LogDeduplicationFilter(max_history=2, time_threshold_seconds=60)

    dedup(make_record("/a.py", 1))
    dedup(make_record("/a.py", 2))
    dedup(make_record("/a.py", 3))

    # Line 1 fell out of the history
    assert dedup(make_record("/a.py", 1)) is True


def test_set_level_rejects_unknown_level():
    with pytest.raises(ValueError):
        logger_manager.set_level("LOUD")


def test_available_levels():
    assert "DEBUG" in logger_manager.get_available_levels()
    assert logger_manager.get_level() in logger_manager.get_available_levels()



def test_dedup_never_suppresses_errors():
    dedup = LogDeduplicationFilter(max_history=5, time_threshold_seconds=60)

    assert dedup(make_record("/a.py", 10, level_no=40)) is True
    assert dedup(make_record("/a.py", 10, level_no=40)) is True
    assert dedup(make_record("/a.py", 10, level_no=50)) is True


def test_repeated_batch_failures_all_reach_sink():
    dedup = LogDeduplicationFilter(max_history=5, time_threshold_seconds=60)
    messages = []
    handler_id = logger.add(messages.append, level="DEBUG", format="{message}", filter=dedup)

    try:
        for batch_id in (1, 2, 3):
            logger.debug(f"Flushing batch #{batch_id}")
            logger.error(f"Batch #{batch_id} failed: unreachable")
    finally:
        logger.remove(handler_id)

    lines = [str(m).strip() for m in messages]
    assert lines.count("Flushing batch #1") == 1
    assert not any(line.startswith("Flushing batch #2") for line in lines)
    assert [line for line in lines if "failed" in line] == [
        "Batch #1 failed: unreachable",
        "Batch #2 failed: unreachable",
        "Batch #3 failed: unreachable",
    ]
