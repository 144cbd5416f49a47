"""A typed container for values carried in D-Bus messages."""

from enum import Enum

_U64 = (1 << 64) - 1

_BOOL_TEXT = {True: "true", False: "false"}


def _signed(value, bits):
    value &= (1 << bits) - 1
    if value >= 1 << (bits - 1):
        value -= 1 << bits
    return value


def _fmt_double(value):
    return f"{value:g}"


class HolderType(Enum):
    """The kind of value a :class:`Holder` carries."""

    NONE = 0
    BYTE = 1
    BOOLEAN = 2
    INT16 = 3
    UINT16 = 4
    INT32 = 5
    UINT32 = 6
    INT64 = 7
    UINT64 = 8
    DOUBLE = 9
    STRING = 10
    OBJ_PATH = 11
    SIGNATURE = 12
    ARRAY = 13
    DICT = 14


_SIGNATURE_CODES = {
    HolderType.BOOLEAN: "b",
    HolderType.BYTE: "y",
    HolderType.INT16: "n",
    HolderType.UINT16: "q",
    HolderType.INT32: "i",
    HolderType.UINT32: "u",
    HolderType.INT64: "x",
    HolderType.UINT64: "t",
    HolderType.DOUBLE: "d",
    HolderType.STRING: "s",
    HolderType.OBJ_PATH: "o",
    HolderType.SIGNATURE: "g",
}

_ARRAY_CODE = "a"
_VARIANT_CODE = "v"
_DICT_BEGIN = "{"
_DICT_END = "}"

_STRING_TYPES = (HolderType.STRING, HolderType.OBJ_PATH, HolderType.SIGNATURE)
_INTEGER_TYPES = (
    HolderType.BYTE,
    HolderType.INT16,
    HolderType.UINT16,
    HolderType.INT32,
    HolderType.UINT32,
    HolderType.INT64,
    HolderType.UINT64,
)
_DICT_KEY_TYPES = (
    HolderType.BYTE,
    HolderType.UINT16,
    HolderType.INT16,
    HolderType.UINT32,
    HolderType.INT32,
    HolderType.UINT64,
    HolderType.INT64,
    HolderType.STRING,
    HolderType.OBJ_PATH,
    HolderType.SIGNATURE,
)


class Holder:
    """A value of one D-Bus type: a basic value, an array or a dictionary."""

    def __init__(self):
        self._type = HolderType.NONE
        self._integer = 0
        self._boolean = False
        self._double = 0.0
        self._string = ""
        self._array = []
        self._dict = []

    @property
    def type(self):
        """The :class:`HolderType` of the held value."""
        return self._type

    def __eq__(self, other):
        if not isinstance(other, Holder):
            return NotImplemented
        if self._type != other._type:
            return False
        kind = self._type
        if kind is HolderType.NONE:
            return True
        if kind is HolderType.ARRAY:
            return self._array == other._array
        if kind is HolderType.DICT:
            return all(self.get_dict(kt) == other.get_dict(kt) for kt in _DICT_KEY_TYPES)
        return self.get_contents() == other.get_contents()

    __hash__ = None

    def __repr__(self):
        if self._type in (HolderType.ARRAY, HolderType.DICT, HolderType.NONE):
            return f"Holder({self._type.name})"
        return f"Holder({self._type.name}, {self.get_contents()!r})"

    # ----- construction -----

    @classmethod
    def _with(cls, kind, **fields):
        holder = cls()
        holder._type = kind
        for name, value in fields.items():
            setattr(holder, name, value)
        return holder

    @classmethod
    def create_byte(cls, value):
        return cls._with(HolderType.BYTE, _integer=int(value) & _U64)

    @classmethod
    def create_boolean(cls, value):
        return cls._with(HolderType.BOOLEAN, _boolean=bool(value))

    @classmethod
    def create_int16(cls, value):
        return cls._with(HolderType.INT16, _integer=int(value) & _U64)

    @classmethod
    def create_uint16(cls, value):
        return cls._with(HolderType.UINT16, _integer=int(value) & _U64)

    @classmethod
    def create_int32(cls, value):
        return cls._with(HolderType.INT32, _integer=int(value) & _U64)

    @classmethod
    def create_uint32(cls, value):
        return cls._with(HolderType.UINT32, _integer=int(value) & _U64)

    @classmethod
    def create_int64(cls, value):
        return cls._with(HolderType.INT64, _integer=int(value) & _U64)

    @classmethod
    def create_uint64(cls, value):
        return cls._with(HolderType.UINT64, _integer=int(value) & _U64)

    @classmethod
    def create_double(cls, value):
        return cls._with(HolderType.DOUBLE, _double=float(value))

    @classmethod
    def create_string(cls, value):
        return cls._with(HolderType.STRING, _string=str(value))

    @classmethod
    def create_object_path(cls, value):
        return cls._with(HolderType.OBJ_PATH, _string=str(value))

    @classmethod
    def create_signature(cls, value):
        return cls._with(HolderType.SIGNATURE, _string=str(value))

    @classmethod
    def create_array(cls):
        return cls._with(HolderType.ARRAY, _array=[])

    @classmethod
    def create_dict(cls):
        return cls._with(HolderType.DICT, _dict=[])

    # ----- representation -----

    def _represent_simple(self):
        kind = self._type
        if kind is HolderType.BOOLEAN:
            return _BOOL_TEXT[bool(self._boolean)]
        if kind is HolderType.DOUBLE:
            return _fmt_double(self._double)
        if kind in _INTEGER_TYPES or kind in _STRING_TYPES:
            return str(self.get_contents())
        return ""

    @staticmethod
    def _represent_key(key_type, key):
        if key_type is HolderType.BOOLEAN:
            return _BOOL_TEXT[bool(key)]
        if key_type is HolderType.BYTE:
            return chr(key)
        if key_type is HolderType.DOUBLE:
            return _fmt_double(key)
        if key_type in _INTEGER_TYPES or key_type in _STRING_TYPES:
            return str(key)
        return ""

    def _represent_lines(self):
        kind = self._type
        if kind is HolderType.ARRAY:
            lines = ["Array:"]
            if self._array and self._array[0]._type is HolderType.BYTE:
                inner = []
                current = ""
                for position, item in enumerate(self._array, start=1):
                    current += f"{item.get_byte():02x} "
                    if position % 32 == 0:
                        inner.append(current)
                        current = ""
                inner.append(current)
            else:
                inner = [line for item in self._array for line in item._represent_lines()]
            lines.extend("  " + line for line in inner)
            return lines
        if kind is HolderType.DICT:
            lines = ["Dictionary:"]
            for key_type, key, value in self._dict:
                lines.append(self._represent_key(key_type, key) + ":")
                lines.extend("  " + line for line in value._represent_lines())
            return lines
        if kind is HolderType.NONE:
            return []
        return [self._represent_simple()]

    def represent(self):
        """Return a readable multi-line rendering of the value."""
        return "".join(line + "\n" for line in self._represent_lines())

    def _signature_simple(self):
        return _SIGNATURE_CODES.get(self._type, "")

    def signature(self):
        """Return the D-Bus type signature of the value."""
        kind = self._type
        if kind in _SIGNATURE_CODES:
            return _SIGNATURE_CODES[kind]
        if kind is HolderType.ARRAY:
            if not self._array:
                return _ARRAY_CODE + _VARIANT_CODE
            first = self._array[0]._type
            if all(item._type is first for item in self._array):
                return _ARRAY_CODE + self._array[0]._signature_simple()
            return _ARRAY_CODE + _VARIANT_CODE
        if kind is HolderType.DICT:
            out = _ARRAY_CODE + _DICT_BEGIN
            if not self._dict:
                out += _SIGNATURE_CODES[HolderType.STRING] + _VARIANT_CODE
            else:
                first_key = self._dict[0][0]
                if all(key_type is first_key for key_type, _, _ in self._dict):
                    out += _SIGNATURE_CODES.get(first_key, "")
                else:
                    out += _VARIANT_CODE
                first_value = self._dict[0][2]
                if all(value._type is first_value._type for _, _, value in self._dict):
                    out += first_value._signature_simple()
                else:
                    out += _VARIANT_CODE
            return out + _DICT_END
        return ""

    # ----- access -----

    def get_contents(self):
        """Return the Python value of a basic type, or None for containers."""
        getters = {
            HolderType.BOOLEAN: self.get_boolean,
            HolderType.BYTE: self.get_byte,
            HolderType.INT16: self.get_int16,
            HolderType.UINT16: self.get_uint16,
            HolderType.INT32: self.get_int32,
            HolderType.UINT32: self.get_uint32,
            HolderType.INT64: self.get_int64,
            HolderType.UINT64: self.get_uint64,
            HolderType.DOUBLE: self.get_double,
            HolderType.STRING: self.get_string,
            HolderType.OBJ_PATH: self.get_object_path,
            HolderType.SIGNATURE: self.get_signature,
        }
        getter = getters.get(self._type)
        return getter() if getter else None

    def get_boolean(self):
        return self._boolean

    def get_byte(self):
        return self._integer & 0xFF

    def get_int16(self):
        return _signed(self._integer, 16)

    def get_uint16(self):
        return self._integer & 0xFFFF

    def get_int32(self):
        return _signed(self._integer, 32)

    def get_uint32(self):
        return self._integer & 0xFFFFFFFF

    def get_int64(self):
        return _signed(self._integer, 64)

    def get_uint64(self):
        return self._integer

    def get_double(self):
        return self._double

    def get_string(self):
        return self._string

    def get_object_path(self):
        return self._string

    def get_signature(self):
        return self._string

    def get_array(self):
        return list(self._array)

    def get_dict(self, key_type):
        """Return the entries whose key is of ``key_type`` as a dict."""
        return {key: value for kt, key, value in self._dict if kt is key_type}

    def get_dict_uint8(self):
        return self.get_dict(HolderType.BYTE)

    def get_dict_uint16(self):
        return self.get_dict(HolderType.UINT16)

    def get_dict_uint32(self):
        return self.get_dict(HolderType.UINT32)

    def get_dict_uint64(self):
        return self.get_dict(HolderType.UINT64)

    def get_dict_int16(self):
        return self.get_dict(HolderType.INT16)

    def get_dict_int32(self):
        return self.get_dict(HolderType.INT32)

    def get_dict_int64(self):
        return self.get_dict(HolderType.INT64)

    def get_dict_string(self):
        return self.get_dict(HolderType.STRING)

    def get_dict_object_path(self):
        return self.get_dict(HolderType.OBJ_PATH)

    def get_dict_signature(self):
        return self.get_dict(HolderType.SIGNATURE)

    # ----- mutation -----

    def array_append(self, holder):
        self._array.append(holder)

    def dict_append(self, key_type, key, value):
        if isinstance(key, bytes):
            key = key.decode()
        self._dict.append((key_type, key, value))