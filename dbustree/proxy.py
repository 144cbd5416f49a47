"""A node of the D-Bus object tree, holding interfaces and child nodes."""

import threading
from types import MappingProxyType

from . import path as dbus_path
from .exceptions import InterfaceNotFoundException, PathNotFoundException
from .interface import Interface
from .message import Message, MessageType

INTROSPECTABLE_INTERFACE = "org.freedesktop.DBus.Introspectable"
PROPERTIES_INTERFACE = "org.freedesktop.DBus.Properties"


def _notify(callback, path):
    if callback is not None:
        callback(path)


class Proxy:
    """An object path on the bus with its interfaces and child objects.

    ``on_child_created`` and ``on_child_signal_received`` may be set to
    callables taking the child's path.
    """

    def __init__(self, conn, bus_name, path):
        self._conn = conn
        self._bus_name = bus_name
        self._path = path
        self._children = {}
        self._interfaces = {}
        self._interface_lock = threading.RLock()
        self._child_lock = threading.RLock()
        self.on_child_created = None
        self.on_child_signal_received = None

    def __repr__(self):
        return f"Proxy({self._path!r})"

    @property
    def path(self):
        return self._path

    @property
    def children(self):
        return MappingProxyType(self._children)

    @property
    def interfaces(self):
        return MappingProxyType(self._interfaces)

    # ----- factories -----

    def interfaces_create(self, name):
        """Create the interface object for ``name``; subclasses may override."""
        return Interface(self._conn, self._bus_name, self._path, name)

    def path_create(self, path):
        """Create the child proxy for ``path``; subclasses may override."""
        return type(self)(self._conn, self._bus_name, path)

    # ----- introspection -----

    def introspect(self):
        """Return the introspection XML of this object."""
        query = Message.create_method_call(self._bus_name, self._path, INTROSPECTABLE_INTERFACE, "Introspect")
        return self._conn.send_with_reply_and_block(query).extract().get_string()

    # ----- interfaces -----

    def interface_exists(self, name):
        with self._interface_lock:
            return name in self._interfaces

    def interface_get(self, name):
        with self._interface_lock:
            try:
                return self._interfaces[name]
            except KeyError:
                raise InterfaceNotFoundException(self._path, name) from None

    def interfaces_count(self):
        """Return how many interfaces are loaded."""
        with self._interface_lock:
            return sum(1 for iface in self._interfaces.values() if iface.is_loaded())

    def interfaces_load(self, managed_interfaces):
        """Create or reload the interfaces described by ``managed_interfaces``."""
        managed = managed_interfaces.get_dict_string()
        with self._interface_lock:
            for name in sorted(managed):
                if name not in self._interfaces:
                    self._interfaces[name] = self.interfaces_create(name)
                self._interfaces[name].load(managed[name])

    def interfaces_reload(self, managed_interfaces):
        """Unload every interface, then load ``managed_interfaces``."""
        with self._interface_lock:
            for iface in self._interfaces.values():
                iface.unload()
            self.interfaces_load(managed_interfaces)

    def interfaces_unload(self, removed_interfaces):
        """Unload the interfaces named in the string array ``removed_interfaces``."""
        with self._interface_lock:
            for option in removed_interfaces.get_array():
                iface = self._interfaces.get(option.get_string())
                if iface is not None:
                    iface.unload()

    def interfaces_loaded(self):
        with self._interface_lock:
            return any(iface.is_loaded() for iface in self._interfaces.values())

    # ----- children -----

    def path_exists(self, path):
        with self._child_lock:
            return path in self._children

    def path_get(self, path):
        with self._child_lock:
            try:
                return self._children[path]
            except KeyError:
                raise PathNotFoundException(self._path, path) from None

    def path_add(self, path, managed_interfaces):
        """Add the object at ``path`` below this proxy, creating intermediate nodes."""
        if not dbus_path.is_descendant(self._path, path):
            return

        with self._child_lock:
            existing = self._children.get(path)
            if existing is not None:
                existing.interfaces_load(managed_interfaces)
                return

            if dbus_path.is_child(self._path, path):
                child = self.path_create(path)
                child.interfaces_load(managed_interfaces)
                self._children.setdefault(path, child)
                _notify(self.on_child_created, path)
                return

            for child_path, child in sorted(self._children.items()):
                if dbus_path.is_descendant(child_path, path):
                    child.path_add(path, managed_interfaces)
                    return

            child_path = dbus_path.next_child(self._path, path)
            child = self.path_create(child_path)
            self._children.setdefault(child_path, child)
            child.path_add(path, managed_interfaces)
            _notify(self.on_child_created, child_path)

    def path_remove(self, path, options):
        """Remove the interfaces in ``options`` from ``path``.

        Returns True when this proxy itself is no longer needed.
        """
        if path == self._path:
            self.interfaces_unload(options)
            return self.path_prune()

        if not dbus_path.is_descendant(self._path, path):
            return False

        with self._child_lock:
            child_path = dbus_path.next_child(self._path, path)
            child = self._children.get(child_path)
            if child is not None and child.path_remove(path, options):
                del self._children[child_path]
        return False

    def path_prune(self):
        """Drop children that are empty; return True if this proxy is empty too."""
        with self._child_lock:
            to_remove = [
                child_path
                for child_path, child in sorted(self._children.items())
                if child.path_prune()
            ]
            for child_path in to_remove:
                del self._children[child_path]
            return not self._children and not self.interfaces_loaded()

    def path_append_child(self, path, child):
        """Attach ``child`` at ``path`` if it is a direct child path."""
        if not dbus_path.is_child(self._path, path):
            return
        with self._child_lock:
            self._children.setdefault(path, child)

    # ----- messages -----

    def message_forward(self, msg):
        """Deliver ``msg`` to the interface or descendant it is addressed to."""
        msg_path = msg.get_path()
        if msg_path == self._path:
            if msg.is_signal(PROPERTIES_INTERFACE, "PropertiesChanged"):
                iface_name = msg.extract().get_string()
                msg.extract_next()
                changed = msg.extract()
                msg.extract_next()
                invalidated = msg.extract()
                if not self.interface_exists(iface_name):
                    return
                self.interface_get(iface_name).signal_property_changed(changed, invalidated)
            elif self.interface_exists(msg.get_interface()):
                self.interface_get(msg.get_interface()).message_handle(msg)
            return

        for child_path, child in sorted(self._children.items()):
            if child_path == msg_path:
                child.message_forward(msg)
                if msg.get_type() is MessageType.SIGNAL:
                    _notify(self.on_child_signal_received, child_path)
                return
            if dbus_path.is_descendant(child_path, msg_path):
                child.message_forward(msg)
                return