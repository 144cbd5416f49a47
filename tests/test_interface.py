from dbustree.exceptions import SendFailed
from dbustree.holder import Holder, HolderType
from dbustree.interface import Interface
from dbustree.message import Message, MessageType

IFACE = "org.bluez.Device1"
PATH = "/org/bluez/hci0/dev_00_00_00_00_00_01"


class FakeConnection:
    def __init__(self, responder=None):
        self.sent = []
        self.responder = responder

    def send_with_reply_and_block(self, msg):
        self.sent.append(msg)
        reply = Message.create_method_return(msg)
        if self.responder is not None:
            self.responder(msg, reply)
        return reply


class RecordingInterface(Interface):
    def __init__(self, *args):
        super().__init__(*args)
        self.changed = []

    def property_changed(self, option_name):
        self.changed.append(option_name)


def props(values):
    holder = Holder.create_dict()
    for name, value in values.items():
        holder.dict_append(HolderType.STRING, name, value)
    return holder


def names(*items):
    holder = Holder.create_array()
    for item in items:
        holder.array_append(Holder.create_string(item))
    return holder


def make(responder=None):
    conn = FakeConnection(responder)
    return conn, RecordingInterface(conn, "org.bluez", PATH, IFACE)


def test_create_method_call_addresses_interface():
    iface = Interface(FakeConnection(), "org.bluez", PATH, IFACE)
    msg = iface.create_method_call("Connect")
    assert msg.get_type() is MessageType.METHOD_CALL
    assert msg.get_path() == PATH
    assert msg.get_interface() == IFACE
    assert msg.get_member() == "Connect"


def test_load_notifies_every_property_in_order():
    _, iface = make()
    iface.unload()
    iface.load(props({"Name": Holder.create_string("a"), "Alias": Holder.create_string("b")}))
    assert iface.changed == ["Alias", "Name"]
    assert iface.is_loaded() is True


def test_unload():
    iface = Interface(FakeConnection(), "org.bluez", PATH, IFACE)
    assert iface.is_loaded() is True
    iface.unload()
    assert iface.is_loaded() is False


def test_property_get_sends_request_and_returns_value():
    def responder(msg, reply):
        reply.append_argument(Holder.create_string("Speaker"), "v")

    conn, iface = make(responder)
    assert iface.property_get("Alias") == Holder.create_string("Speaker")
    sent = conn.sent[0]
    assert sent.get_member() == "Get"
    assert sent.get_interface() == "org.freedesktop.DBus.Properties"
    assert sent.extract().get_string() == IFACE
    sent.extract_next()
    assert sent.extract().get_string() == "Alias"


def test_property_get_all_returns_dictionary():
    def responder(msg, reply):
        reply.append_argument(props({"Alias": Holder.create_string("Speaker")}), "a{sv}")

    conn, iface = make(responder)
    result = iface.property_get_all()
    assert result.get_dict_string()["Alias"] == Holder.create_string("Speaker")
    assert conn.sent[0].get_member() == "GetAll"


def test_property_refresh_updates_and_notifies_on_change():
    current = {"value": Holder.create_string("new")}

    def responder(msg, reply):
        reply.append_argument(current["value"], "v")

    conn, iface = make(responder)
    iface.load(props({"Alias": Holder.create_string("old")}))
    iface.property_refresh("Alias")
    assert iface.changed == ["Alias", "Alias"]
    iface.property_refresh("Alias")
    assert iface.changed == ["Alias", "Alias"]
    assert len(conn.sent) == 2


def test_property_refresh_ignores_unknown_property():
    conn = FakeConnection()
    iface = Interface(conn, "org.bluez", PATH, IFACE)
    iface.property_refresh("Alias")
    assert conn.sent == []
    assert iface.is_loaded() is True


def test_property_refresh_skipped_when_unloaded():
    conn = FakeConnection()
    iface = Interface(conn, "org.bluez", PATH, IFACE)
    iface.load(props({"Alias": Holder.create_string("old")}))
    iface.unload()
    iface.property_refresh("Alias")
    assert iface.is_loaded() is False
    assert conn.sent == []
    iface.load(props({"Alias": Holder.create_string("old")}))
    iface.property_refresh("Alias")
    assert iface.is_loaded() is True
    assert len(conn.sent) == 1
    assert conn.sent[0].get_member() == "Get"


def test_property_refresh_tolerates_send_failure():
    def responder(msg, reply):
        raise SendFailed("org.bluez.Error.Failed", "gone", msg.to_string())

    conn, iface = make(responder)
    iface.load(props({"Alias": Holder.create_string("old")}))
    iface.property_refresh("Alias")
    assert iface.changed == ["Alias"]
    assert len(conn.sent) == 1


def test_signal_property_changed_updates_and_invalidates():
    conn, iface = make()
    iface.load(props({"Alias": Holder.create_string("old")}))
    iface.signal_property_changed(props({"RSSI": Holder.create_int16(-40)}), names("Alias"))
    assert iface.changed == ["Alias", "RSSI"]
    iface.property_refresh("Alias")
    assert conn.sent == []


def test_message_handle_is_a_noop_hook():
    _, iface = make()
    msg = Message.create_signal(PATH, IFACE, "Something")
    iface.message_handle(msg)
    assert iface.changed == []