"""D-Bus messages: header fields plus typed arguments."""

import itertools
import threading
from enum import IntEnum

from .holder import Holder, HolderType

_TYPE_NAMES = {
    1: "method call",
    2: "method return",
    3: "error",
    4: "signal",
}

_BASIC_CONVERTERS = {
    "y": lambda h: Holder.create_byte(h.get_byte()),
    "b": lambda h: Holder.create_boolean(h.get_boolean()),
    "n": lambda h: Holder.create_int16(h.get_int16()),
    "q": lambda h: Holder.create_uint16(h.get_uint16()),
    "i": lambda h: Holder.create_int32(h.get_int32()),
    "u": lambda h: Holder.create_uint32(h.get_uint32()),
    "x": lambda h: Holder.create_int64(h.get_int64()),
    "t": lambda h: Holder.create_uint64(h.get_uint64()),
    "d": lambda h: Holder.create_double(h.get_double()),
    "s": lambda h: Holder.create_string(h.get_string()),
    "o": lambda h: Holder.create_object_path(h.get_object_path()),
    "g": lambda h: Holder.create_signature(h.get_signature()),
}

_KEY_TYPES = {
    "y": HolderType.BYTE,
    "n": HolderType.INT16,
    "q": HolderType.UINT16,
    "i": HolderType.INT32,
    "u": HolderType.UINT32,
    "x": HolderType.INT64,
    "t": HolderType.UINT64,
    "s": HolderType.STRING,
    "o": HolderType.OBJ_PATH,
    "g": HolderType.SIGNATURE,
}


def _marshal(argument, signature):
    """Return ``argument`` as it reads back once written with ``signature``.

    Returns None when the signature describes nothing that can be written.
    """
    if not signature:
        return None
    code = signature[0]
    converter = _BASIC_CONVERTERS.get(code)
    if converter is not None:
        return converter(argument)
    if code == "v":
        return _marshal(argument, argument.signature())
    if code != "a":
        return None

    inner = signature[1:]
    if not inner.startswith("{"):
        result = Holder.create_array()
        for element in argument.get_array():
            marshalled = _marshal(element, inner)
            if marshalled is not None and marshalled.type is not HolderType.NONE:
                result.array_append(marshalled)
        return result

    entry = inner[1:-1]
    key_type = _KEY_TYPES.get(entry[:1])
    value_sig = entry[1:]
    if key_type is None:
        return Holder.create_array()
    entries = argument.get_dict(key_type)
    if not entries:
        # An empty dictionary reads back as an empty array.
        return Holder.create_array()
    key_converter = _BASIC_CONVERTERS[entry[0]]
    result = Holder.create_dict()
    for key in sorted(entries):
        key_holder = Holder._with(key_type, **_key_fields(key_type, key))
        stored_key = key_converter(key_holder).get_contents()
        value = _marshal(entries[key], value_sig)
        result.dict_append(key_type, stored_key, value if value is not None else Holder())
    return result


def _key_fields(key_type, key):
    if key_type in (HolderType.STRING, HolderType.OBJ_PATH, HolderType.SIGNATURE):
        return {"_string": str(key)}
    return {"_integer": int(key) & ((1 << 64) - 1)}


class MessageType(IntEnum):
    """The kind of a D-Bus message."""

    INVALID = 0
    METHOD_CALL = 1
    METHOD_RETURN = 2
    ERROR = 3
    SIGNAL = 4


class Message:
    """A D-Bus message with header fields and an argument reader."""

    _counter = itertools.count()
    _counter_lock = threading.Lock()

    def __init__(
        self,
        msg_type=MessageType.INVALID,
        path=None,
        interface=None,
        member=None,
        destination=None,
        sender=None,
        serial=0,
    ):
        self._type = MessageType(msg_type)
        self._path = path
        self._interface = interface
        self._member = member
        self._destination = destination
        self._sender = sender
        self._serial = serial
        self.error_name = None
        self.reply_serial = 0
        self._wire = []
        self._arguments = []
        self._position = 0
        self._iter_initialized = False
        self._is_extracted = False
        self._extracted = Holder()
        self._unique_id = self._next_id() if self.is_valid() else -1

    @classmethod
    def _next_id(cls):
        with cls._counter_lock:
            return next(cls._counter)

    def __repr__(self):
        return f"Message({self.to_string()!r})"

    # ----- construction -----

    @classmethod
    def create_method_call(cls, bus_name, path, interface, method):
        return cls(MessageType.METHOD_CALL, path, interface, method, destination=bus_name)

    @classmethod
    def create_method_return(cls, msg):
        if not msg.is_valid():
            return cls()
        reply = cls(MessageType.METHOD_RETURN, destination=msg._sender)
        reply.reply_serial = msg._serial
        return reply

    @classmethod
    def create_error(cls, msg, error_name, error_message):
        if not msg.is_valid():
            return cls()
        reply = cls(MessageType.ERROR, destination=msg._sender)
        reply.reply_serial = msg._serial
        reply.error_name = error_name
        reply.append_argument(Holder.create_string(error_message), "s")
        return reply

    @classmethod
    def create_signal(cls, path, interface, name):
        return cls(MessageType.SIGNAL, path, interface, name)

    def copy(self):
        """Return an independent copy carrying a fresh unique id."""
        if not self.is_valid():
            return Message()
        other = Message(
            self._type,
            self._path,
            self._interface,
            self._member,
            self._destination,
            self._sender,
            self._serial,
        )
        other.error_name = self.error_name
        other.reply_serial = self.reply_serial
        other._wire = list(self._wire)
        other._arguments = list(self._arguments)
        other._is_extracted = self._is_extracted
        other._extracted = self._extracted
        return other

    # ----- state -----

    def is_valid(self):
        return self._type is not MessageType.INVALID

    def append_argument(self, argument, signature):
        """Append ``argument`` encoded with the D-Bus ``signature``."""
        marshalled = _marshal(argument, signature)
        if marshalled is not None:
            self._wire.append((signature, marshalled))
        self._arguments.append(argument)

    def get_unique_id(self):
        return self._unique_id

    def get_serial(self):
        return self._serial if self.is_valid() else 0

    def get_signature(self):
        if self.is_valid() and self._iter_initialized and self._position < len(self._wire):
            return self._wire[self._position][0]
        return ""

    def get_type(self):
        return self._type

    def get_path(self):
        if self._type in (MessageType.SIGNAL, MessageType.METHOD_CALL):
            return self._path or ""
        return ""

    def get_interface(self):
        if self.is_valid():
            return self._interface or ""
        return ""

    def get_member(self):
        if self._type is MessageType.METHOD_CALL:
            return self._member or ""
        return ""

    def is_signal(self, interface, signal_name):
        return (
            self._type is MessageType.SIGNAL
            and self._interface == interface
            and self._member == signal_name
        )

    def to_string(self, append_arguments=False):
        """Return a one-line summary, optionally followed by the arguments."""
        if not self.is_valid():
            return "INVALID"

        def show(value):
            return value if value is not None else "(null)"

        text = (
            f"[{self._unique_id}] {_TYPE_NAMES.get(int(self._type), '(unknown message type)')}"
            f"[{show(self._sender)}->{show(self._destination)}] "
            f"{show(self._path)} {show(self._interface)} {show(self._member)}"
        )
        if self._type is MessageType.METHOD_CALL and append_arguments:
            text += "\nArguments: \n" + "".join(arg.represent() for arg in self._arguments)
        return text

    # ----- argument reading -----

    def extract(self):
        """Return the argument at the read position."""
        if not self.is_valid():
            return Holder()
        if not self._is_extracted:
            if not self._iter_initialized:
                self.extract_reset()
            if self._position < len(self._wire):
                self._extracted = self._wire[self._position][1]
            else:
                self._extracted = Holder()
            self._is_extracted = True
        return self._extracted

    def extract_reset(self):
        if self.is_valid():
            self._position = 0
            self._iter_initialized = True

    def extract_has_next(self):
        return self._iter_initialized and self._position + 1 < len(self._wire)

    def extract_next(self):
        if self.extract_has_next():
            self._position += 1
            self._is_extracted = False