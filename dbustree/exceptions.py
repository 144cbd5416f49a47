"""Exceptions raised by the D-Bus object tree."""


class SimpleDBusError(Exception):
    """Base class of every error raised by this package."""


class NotInitialized(SimpleDBusError):
    """An object was used before it was initialised."""

    def __init__(self):
        super().__init__("Object not initialized.")


class DBusException(SimpleDBusError):
    """The bus reported an error."""

    def __init__(self, err_name, err_message):
        self.err_name = err_name
        self.err_message = err_message
        super().__init__(f"{err_name}: {err_message}")


class SendFailed(SimpleDBusError):
    """Sending a message and waiting for its reply failed."""

    def __init__(self, err_name, err_message, msg_str):
        self.err_name = err_name
        self.err_message = err_message
        self.msg_str = msg_str
        super().__init__(f"{err_name}: {err_message}\n{msg_str}")


class InterfaceNotFoundException(SimpleDBusError):
    """A path does not carry the requested interface."""

    def __init__(self, path, interface):
        self.path = path
        self.interface = interface
        super().__init__(f"Path {path} does not contain interface {interface}")


class PathNotFoundException(SimpleDBusError):
    """A path has no child at the requested sub-path."""

    def __init__(self, path, subpath):
        self.path = path
        self.subpath = subpath
        super().__init__(f"Path {path} does not contain sub-path {subpath}")