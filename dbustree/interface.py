"""One D-Bus interface on an object, with a cache of its properties."""

import threading

from .exceptions import SendFailed
from .holder import Holder
from .message import Message

PROPERTIES_INTERFACE = "org.freedesktop.DBus.Properties"


class Interface:
    """An interface of an object on the bus, caching its property values."""

    def __init__(self, conn, bus_name, path, interface_name):
        self._conn = conn
        self._bus_name = bus_name
        self._path = path
        self._interface_name = interface_name
        self._loaded = True
        self._properties = {}
        self._property_valid_map = {}
        self._property_update_lock = threading.RLock()

    def __repr__(self):
        return f"Interface({self._path!r}, {self._interface_name!r})"

    # ----- life cycle -----

    def load(self, options):
        """Store the property values in ``options`` and mark the interface loaded."""
        changed = options.get_dict_string()
        with self._property_update_lock:
            for name, value in changed.items():
                self._properties[name] = value
                self._property_valid_map[name] = True
        for name in sorted(changed):
            self.property_changed(name)
        self._loaded = True

    def unload(self):
        self._loaded = False

    def is_loaded(self):
        return self._loaded

    # ----- methods -----

    def create_method_call(self, method_name):
        """Return a method call addressed to this interface."""
        return Message.create_method_call(self._bus_name, self._path, self._interface_name, method_name)

    # ----- properties -----

    def _properties_call(self, method):
        return Message.create_method_call(self._bus_name, self._path, PROPERTIES_INTERFACE, method)

    def property_get_all(self):
        """Fetch all properties of the interface from the bus."""
        query = self._properties_call("GetAll")
        query.append_argument(Holder.create_string(self._interface_name), "s")
        return self._conn.send_with_reply_and_block(query).extract()

    def property_get(self, property_name):
        """Fetch one property from the bus."""
        query = self._properties_call("Get")
        query.append_argument(Holder.create_string(self._interface_name), "s")
        query.append_argument(Holder.create_string(property_name), "s")
        return self._conn.send_with_reply_and_block(query).extract()

    def property_set(self, property_name, value):
        """Write one property on the bus."""
        query = self._properties_call("Set")
        query.append_argument(Holder.create_string(self._interface_name), "s")
        query.append_argument(Holder.create_string(property_name), "s")
        query.append_argument(value, "v")
        self._conn.send_with_reply_and_block(query)

    def property_refresh(self, property_name):
        """Re-read a valid cached property and notify if it changed."""
        if not self._loaded or not self._property_valid_map.get(property_name, False):
            return

        notify = False
        with self._property_update_lock:
            # The object may vanish before the reply arrives, so a failed
            # request is tolerated.
            try:
                latest = self.property_get(property_name)
                self._property_valid_map[property_name] = True
                if self._properties.get(property_name, Holder()) != latest:
                    self._properties[property_name] = latest
                    notify = True
            except SendFailed:
                self._property_valid_map[property_name] = True

        if notify:
            self.property_changed(property_name)

    def property_changed(self, option_name):
        """Hook called after a property value changed."""

    # ----- signals -----

    def signal_property_changed(self, changed_properties, invalidated_properties):
        """Apply a PropertiesChanged signal to the cache."""
        changed = changed_properties.get_dict_string()
        with self._property_update_lock:
            for name, value in changed.items():
                self._properties[name] = value
                self._property_valid_map[name] = True
            for removed in invalidated_properties.get_array():
                self._property_valid_map[removed.get_string()] = False

        for name in sorted(changed):
            self.property_changed(name)

    # ----- messages -----

    def message_handle(self, msg):
        """Hook called for messages addressed to this interface."""