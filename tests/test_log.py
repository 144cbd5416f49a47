import pytest

from dbustree.log import (
    LogLevel,
    log_debug,
    log_error,
    log_fatal,
    log_info,
    log_verbose,
    log_warn,
    set_log_level,
    set_receiver,
)


@pytest.fixture(autouse=True)
def records():
    received = []
    set_log_level(LogLevel.ERROR)
    set_receiver(lambda *record: received.append(record))
    yield received
    set_log_level(LogLevel.ERROR)
    set_receiver(None)


def test_default_level_drops_info(records):
    log_info("hello")
    log_warn("hello")
    assert records == []


def test_default_level_delivers_error_and_fatal(records):
    log_error("bad")
    log_fatal("worse")
    assert [(r[0], r[5]) for r in records] == [(LogLevel.ERROR, "bad"), (LogLevel.FATAL, "worse")]


def test_arguments_are_formatted(records):
    log_error("value {} of {}", 5, "x")
    assert records[0][5] == "value 5 of x"


def test_message_without_arguments_is_kept_verbatim(records):
    log_error("braces {} stay")
    assert records[0][5] == "braces {} stay"


def test_module_and_caller_are_reported(records):
    log_error("where")
    level, module, file, line, function, _ = records[0]
    assert module == "SimpleDBus"
    assert file.endswith("test_log.py")
    assert function == "test_module_and_caller_are_reported"
    assert line > 0


def test_verbose_level_delivers_everything(records):
    set_log_level(LogLevel.VERBOSE)
    for log in (log_fatal, log_error, log_warn, log_info, log_debug, log_verbose):
        log("m")
    assert [r[0] for r in records] == list(LogLevel)[1:]


def test_none_level_delivers_nothing(records):
    set_log_level(LogLevel.NONE)
    log_fatal("m")
    assert records == []


def test_removing_receiver_drops_messages(records):
    set_receiver(None)
    log_error("m")
    assert records == []


def test_invalid_level_rejected():
    with pytest.raises(ValueError):
        set_log_level(42)