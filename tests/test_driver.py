import threading
from unittest.mock import call

import pytest

from common.errors import PrinterConnectionError, PrinterTransmissionError
from printer.directives import (
    Cut,
    Encode,
    Feed,
    HardwareInit,
    OpenCashDrawerPulse,
    RawBytes,
    SetAlign,
    SetFont,
    SetSize,
    SetStyle,
    Text,
)
from printer.driver import ReceiptPrinter
from printer.template import build_ticket

CONFIG = {"host": "10.0.0.5", "port": 9100, "timeout": 3}


def test_connect_opens_network_device(network):
    printer = ReceiptPrinter(CONFIG)
    assert printer.connect() is network
    network.factory.assert_called_once_with("10.0.0.5", port=9100, timeout=3.0)
    network.open.assert_called_once_with()
    # second call reuses the device
    assert printer.connect() is network
    assert network.factory.call_count == 1
    printer.disconnect()
    network.close.assert_called_once_with()


def test_connection_failure(network):
    network.open.side_effect = OSError("No route to host")
    printer = ReceiptPrinter(CONFIG)
    with pytest.raises(PrinterConnectionError):
        printer.connect()
    assert printer.device is None
    # the lock was released, a new attempt is possible
    network.open.side_effect = None
    assert printer.connect() is network
    printer.disconnect()


def test_send_replays_directives_in_order(network):
    printer = ReceiptPrinter(CONFIG)
    printer.send([
        HardwareInit(),
        Encode("cp858"),
        SetFont("b"),
        SetSize(1, 1),
        SetSize(1, 2),
        SetAlign("center"),
        SetStyle("bold"),
        Text("Juan"),
        Feed(2),
        Feed(0),
        RawBytes(b"\x1b\x42\x03\x02"),
        SetStyle("normal"),
        OpenCashDrawerPulse(2),
        Cut(),
    ])
    printer.disconnect()

    assert network.mock_calls[:15] == [
        call.open(),
        call.hw("INIT"),
        call.charcode("CP858"),
        call.set(font="b"),
        call.set(normal_textsize=True),
        call.set(custom_size=True, width=1, height=2),
        call.set(align="center"),
        call.set(bold=True),
        call.textln("Juan"),
        call.text("\n\n"),
        call._raw(b"\x1b\x42\x03\x02"),
        call.set(bold=False),
        call.cashdraw(2),
        call.cut(),
        call.close(),
    ]


def test_transmission_failure(network):
    network.textln.side_effect = [None, OSError("Broken pipe")]
    printer = ReceiptPrinter(CONFIG)
    with pytest.raises(PrinterTransmissionError):
        printer.send([Text("uno"), Text("dos"), Cut()])
    printer.disconnect()
    # what was sent before the failure stays sent; nothing after it is attempted
    assert network.textln.call_count == 2
    network.cut.assert_not_called()


def test_errors_are_runtime_errors(network):
    network.open.side_effect = OSError("offline")
    with pytest.raises(RuntimeError):
        ReceiptPrinter(CONFIG).connect()


def test_is_online(network):
    assert ReceiptPrinter(CONFIG).is_online() is True
    network.close.assert_called_once_with()

    network.open.side_effect = OSError("offline")
    assert ReceiptPrinter(CONFIG).is_online() is False


def test_kick_drawer(network):
    printer = ReceiptPrinter(CONFIG)
    printer.kick_drawer(5)
    printer.disconnect()
    network.cashdraw.assert_called_once_with(5)


def test_context_manager(network):
    with ReceiptPrinter(CONFIG) as printer:
        printer.send([Text("hola")])
    network.close.assert_called_once_with()


def test_full_ticket_is_sent(network, order):
    printer = ReceiptPrinter(CONFIG)
    printer.send(build_ticket(order))
    printer.disconnect()
    printed = [c.args[0] for c in network.textln.call_args_list]
    assert printed[:2] == ["21:30", "Juan Perez"]
    assert "TOTAL: $25.400" in printed
    network.cut.assert_called_once_with()


def test_one_connection_per_printer_at_a_time(network):
    first = ReceiptPrinter(CONFIG)
    second = ReceiptPrinter(dict(CONFIG))
    first.connect()

    connected = threading.Event()

    def worker():
        second.connect()
        connected.set()
        second.disconnect()

    thread = threading.Thread(target=worker)
    thread.start()
    assert not connected.wait(0.2)
    first.disconnect()
    assert connected.wait(2)
    thread.join(2)


def test_other_printer_is_not_blocked(network):
    first = ReceiptPrinter(CONFIG)
    other = ReceiptPrinter({"host": "10.0.0.6", "port": 9100})
    first.connect()
    try:
        other.connect()
        other.disconnect()
    finally:
        first.disconnect()
