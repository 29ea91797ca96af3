# tests/test_logger.py

import json

from tasksync.utils.logger import get_logger


def test_records_are_json_with_bound_context(capsys):
    logger = get_logger("tasksync-logger-json", "info").bind(component="sync")

    logger.info("Propagated task change", source_task_id=7, synced=2)
    logger.debug("filtered out")

    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 1
    record = json.loads(lines[0])
    assert record["level"] == "INFO"
    assert record["service"] == "tasksync-logger-json"
    assert record["message"] == "Propagated task change"
    assert record["component"] == "sync"
    assert record["source_task_id"] == 7


def test_exception_includes_traceback(capsys):
    logger = get_logger("tasksync-logger-exc", "DEBUG")

    try:
        raise RuntimeError("boom")
    except RuntimeError:
        logger.exception("Failed to accept share request", request_id=3)

    record = json.loads(capsys.readouterr().out.strip())
    assert record["level"] == "ERROR"
    assert record["request_id"] == 3
    assert "RuntimeError: boom" in record["traceback"]
