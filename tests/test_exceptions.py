import pytest

from dbustree.exceptions import (
    DBusException,
    InterfaceNotFoundException,
    NotInitialized,
    PathNotFoundException,
    SendFailed,
    SimpleDBusError,
)


def test_not_initialized_message():
    assert str(NotInitialized()) == "Object not initialized."


def test_dbus_exception_message_and_fields():
    err = DBusException("org.example.Error", "went wrong")
    assert str(err) == "org.example.Error: went wrong"
    assert err.err_name == "org.example.Error"
    assert err.err_message == "went wrong"


def test_send_failed_message_has_message_dump_on_new_line():
    err = SendFailed("org.example.Failed", "timeout", "[1] method call")
    first, second = str(err).split("\n")
    assert first == "org.example.Failed: timeout"
    assert second == "[1] method call"


def test_interface_not_found_message():
    err = InterfaceNotFoundException("/org/example", "org.example.Iface")
    assert str(err) == "Path /org/example does not contain interface org.example.Iface"


def test_path_not_found_message():
    err = PathNotFoundException("/org", "/org/example")
    assert str(err) == "Path /org does not contain sub-path /org/example"


@pytest.mark.parametrize(
    "make, expected",
    [
        (lambda: NotInitialized(), "Object not initialized."),
        (lambda: DBusException("a", "b"), "a: b"),
        (lambda: SendFailed("a", "b", "c"), "a: b\nc"),
        (lambda: InterfaceNotFoundException("/p", "i"), "Path /p does not contain interface i"),
        (lambda: PathNotFoundException("/p", "/p/q"), "Path /p does not contain sub-path /p/q"),
    ],
)
def test_all_derive_from_base(make, expected):
    err = make()
    with pytest.raises(SimpleDBusError) as info:
        raise err
    assert info.value is err
    assert str(info.value) == expected