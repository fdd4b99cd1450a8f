import json
import logging

from shared.logger import ROOT_LOGGER_NAME, ForgeLogger, _JSONFormatter


def _record(caplog):
    return caplog.records[-1]


def test_structured_fields(caplog):
    caplog.set_level(logging.DEBUG, logger=ROOT_LOGGER_NAME)
    log = ForgeLogger("unit")
    log.info("Band computed", band="strong", length=14)

    record = _record(caplog)
    assert record.name == "passforge.unit"
    assert record.component == "unit"
    assert record.operation is None
    assert record.forge_extra == {"band": "strong", "length": 14}


def test_operation_context(caplog):
    caplog.set_level(logging.DEBUG, logger=ROOT_LOGGER_NAME)
    log = ForgeLogger("unit")
    with log.operation("outer"):
        with log.operation("inner"):
            log.debug("nested")
            assert _record(caplog).operation == "inner"
        log.debug("back")
        assert _record(caplog).operation == "outer"
    log.debug("done")
    assert _record(caplog).operation is None


def test_timed_logs_start_and_finish(caplog):
    caplog.set_level(logging.DEBUG, logger=ROOT_LOGGER_NAME)
    log = ForgeLogger("unit")
    with log.timed("work") as timer:
        pass
    messages = [r.getMessage() for r in caplog.records]
    assert "Started: work" in messages
    assert any(m.startswith("Completed: work") for m in messages)
    assert timer.elapsed >= 0


def test_json_formatter():
    record = logging.LogRecord("passforge.unit", logging.WARNING, __file__, 1, "hello %s", ("x",), None)
    record.component = "unit"
    record.operation = "check"
    record.forge_extra = {"count": 3}
    entry = json.loads(_JSONFormatter().format(record))
    assert entry["level"] == "WARNING"
    assert entry["message"] == "hello x"
    assert entry["component"] == "unit"
    assert entry["operation"] == "check"
    assert entry["extra"] == {"count": 3}
    assert "exc_info" not in entry


def test_configure_json_file(tmp_path):
    log_file = tmp_path / "logs" / "passforge.log"
    root = ForgeLogger.configure(
        log_level="DEBUG", log_file=log_file, json_logs=True, console_output=False
    )
    try:
        ForgeLogger("unit").info("to file", answer=42)
        for handler in root.handlers:
            handler.flush()
        lines = log_file.read_text(encoding="utf-8").strip().splitlines()
        entry = json.loads(lines[-1])
        assert entry["message"] == "to file"
        assert entry["extra"] == {"answer": 42}
    finally:
        for handler in list(root.handlers):
            handler.close()
        root.handlers.clear()
        root.addHandler(logging.NullHandler())
        root.setLevel(logging.NOTSET)
