# dbustree

A pure-Python toolkit for modelling D-Bus traffic: typed values, messages,
and a tree of object-path proxies that keeps interface properties in step
with `PropertiesChanged`, `InterfacesAdded` and `InterfacesRemoved` signals.

## Installation

```
pip install .
```

## What is inside

- `dbustree.holder`: `Holder` and `HolderType`. These are typed D-Bus values: bytes, booleans, integers of every width, doubles, strings, object paths, signatures, arrays and dictionaries. `Holder.signature()` gives the D-Bus signature, `Holder.represent()` gives a readable dump, and the `get_dict_*` methods read dictionary entries by key type.
- `dbustree.message`: `Message` and `MessageType`. A message is a method call, a method return, an error or a signal. Its arguments are added with `append_argument(holder, signature)` and read back with `extract`, `extract_next` and `extract_reset`. `to_string()` gives a one-line summary.
- `dbustree.path`: helpers for object paths. They are `count_elements`, `split_elements`, `fetch_elements`, `is_child`, `is_parent`, `is_descendant`, `is_ascendant` and `next_child`.
- `dbustree.interface`: `Interface`. It is a cached view of one interface on one object. It offers `property_get`, `property_get_all`, `property_set` and `property_refresh`, and applies `PropertiesChanged` through `signal_property_changed`. The `property_changed` hook can be overridden in a subclass.
- `dbustree.proxy`: `Proxy`. It is a node in the object tree. `path_add` creates descendants, including intermediate nodes. `path_remove` and `path_prune` remove them. `message_forward` routes messages to the right node and interface. You can set `on_child_created` and `on_child_signal_received` to callables that take the child's path.
- `dbustree.object_manager`: `ObjectManager`. It is the `org.freedesktop.DBus.ObjectManager` interface and provides `get_managed_objects`. Incoming signals are reported through the `interfaces_added` and `interfaces_removed` callables.
- `dbustree.log`: levelled logging through `log_fatal` … `log_verbose`. Messages can take `str.format` arguments. The level is set with `set_log_level` (default `LogLevel.ERROR`). A receiver is installed with `set_receiver`.
- `dbustree.exceptions`: the errors raised by the modules above. All of them derive from `SimpleDBusError`.

## Example

```python
from dbustree.holder import Holder, HolderType

props = Holder.create_dict()
props.dict_append(HolderType.STRING, "Name", Holder.create_string("sensor"))
props.dict_append(HolderType.STRING, "RSSI", Holder.create_int16(-60))

print(props.signature())                          # a{sv}
print(props.get_dict_string()["Name"].get_string())  # sensor
print(props.represent())
```

```python
from dbustree import path

path.is_child("/org/example", "/org/example/node0")                # True
path.next_child("/org/example", "/org/example/node0/item1")        # "/org/example/node0"
```

A `Proxy`, `Interface` or `ObjectManager` talks to the bus through a
connection object that you supply. That object must offer
`send_with_reply_and_block(message)` and return the reply `Message`.

## What this package does not do

The package has no bus connection of its own. It does not open sockets,
authenticate to a bus daemon, or encode messages into the D-Bus wire format.
A `Message` keeps its arguments in memory, converted to the types their
signatures name. Connecting the tree to a real bus means writing the
connection object described above.

## Running the tests

```
pip install .[test]
pytest
```