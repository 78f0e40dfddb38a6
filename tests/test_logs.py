import logging

import pytest

from nudm.logs import TRACE, get_logger, set_log_level, set_report_caller


@pytest.fixture(autouse=True)
def _reset():
    yield
    set_log_level("info")
    set_report_caller(False)


def _format(logger, level, message, lineno=10):
    record = logger.makeRecord(logger.name, level, __file__, lineno, message, (), None, func="handler")
    handler = logging.getLogger("nudm").handlers[0]
    return record, handler.format(record)


def test_get_logger_names_category():
    assert get_logger("EE").name == "nudm.EE"
    assert get_logger("EE") is get_logger("EE")


def test_get_logger_rejects_empty():
    with pytest.raises(ValueError):
        get_logger("")


def test_format_has_fields_and_trimmed_message():
    _, text = _format(get_logger("EE"), logging.INFO, "  hello  ")
    assert text.endswith(" [INFO][UDM][EE] hello")


def test_critical_is_labelled_fatal():
    _, text = _format(get_logger("CFG"), logging.CRITICAL, "stop")
    assert "[FATAL][UDM][CFG] stop" in text


def test_report_caller_toggles_location():
    logger = get_logger("App")
    set_report_caller(True)
    record, text = _format(logger, logging.INFO, "x", lineno=42)
    assert text.endswith(f":{record.lineno} handler)")
    set_report_caller(False)
    _, text = _format(logger, logging.INFO, "x", lineno=42)
    assert text.endswith("] x")


def test_set_log_level_by_name():
    set_log_level("warn")
    logger = get_logger("CFG")
    assert logger.getEffectiveLevel() == logging.WARNING
    assert not logger.isEnabledFor(logging.INFO)


def test_set_log_level_trace():
    set_log_level("trace")
    assert get_logger("UEAU").isEnabledFor(TRACE)


def test_set_log_level_by_number():
    set_log_level(logging.ERROR)
    assert get_logger("SDM").getEffectiveLevel() == logging.ERROR


def test_set_log_level_rejects_unknown():
    with pytest.raises(ValueError):
        set_log_level("loud")