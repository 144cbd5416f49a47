"""The org.freedesktop.DBus.ObjectManager interface."""

from .interface import Interface
from .message import Message

OBJECT_MANAGER_INTERFACE = "org.freedesktop.DBus.ObjectManager"


class ObjectManager(Interface):
    """Reports objects appearing and disappearing below a path.

    ``interfaces_added`` and ``interfaces_removed`` may be set to callables
    taking the object path and the holder of interfaces.
    """

    def __init__(self, conn, bus_name, path):
        super().__init__(conn, bus_name, path, OBJECT_MANAGER_INTERFACE)
        self.interfaces_added = None
        self.interfaces_removed = None

    def get_managed_objects(self, use_callbacks=False):
        """Fetch all managed objects, optionally reporting each one as added."""
        query = Message.create_method_call(self._bus_name, self._path, self._interface_name, "GetManagedObjects")
        managed = self._conn.send_with_reply_and_block(query).extract()
        if use_callbacks and self.interfaces_added is not None:
            for path, options in sorted(managed.get_dict_object_path().items()):
                self.interfaces_added(path, options)
        return managed

    def _dispatch(self, msg):
        for signal, callback in (
            ("InterfacesAdded", self.interfaces_added),
            ("InterfacesRemoved", self.interfaces_removed),
        ):
            if msg.is_signal(self._interface_name, signal):
                path = msg.extract().get_string()
                msg.extract_next()
                options = msg.extract()
                if callback is not None:
                    callback(path, options)
                return True
        return False

    def message_handle(self, msg):
        self._dispatch(msg)

    def process_received_signal(self, message):
        """Handle ``message`` if it is one of our signals; return whether it was."""
        if message.get_path() != self._path:
            return False
        return self._dispatch(message)