import json

import pytest

import printer_cli
from config import settings


@pytest.fixture(autouse=True)
def printer_config(monkeypatch):
    monkeypatch.setattr(settings, "PRINTER", {"host": "10.0.0.9", "port": 9100, "timeout": 1})
    monkeypatch.setattr(settings, "LAYOUT", {"profile": "classic"})


def test_print_payload_string(network, order_payload, capsys):
    assert printer_cli.main(["--payload", json.dumps(order_payload)]) == 0
    assert "[OK] Order printed successfully" in capsys.readouterr().out
    network.cut.assert_called_once_with()


def test_print_payload_file(tmp_path, network, order_payload):
    path = tmp_path / "order.json"
    path.write_text(json.dumps(order_payload), encoding="utf-8")
    assert printer_cli.main(["--payload", str(path), "--printer", "10.0.0.7:9101", "--profile", "wide"]) == 0
    network.factory.assert_called_once_with("10.0.0.7", port=9101, timeout=1.0)
    network.charcode.assert_called_once_with("CP850")


def test_invalid_payload(network, capsys):
    assert printer_cli.main(["--payload", '{"items": []}']) == 2
    assert "[ERROR]" in capsys.readouterr().err
    assert printer_cli.main(["--payload", "{not json"]) == 2
    network.factory.assert_not_called()


def test_missing_payload(network):
    assert printer_cli.main([]) == 2


def test_printer_offline(network, order_payload):
    network.open.side_effect = OSError("offline")
    assert printer_cli.main(["--payload", json.dumps(order_payload)]) == 1


def test_preview(tmp_path, network, order_payload):
    target = tmp_path / "ticket.png"
    assert printer_cli.main(["--payload", json.dumps(order_payload), "--preview", str(target)]) == 0
    assert target.exists()
    network.factory.assert_not_called()


def test_check_drawer_and_test_page(network):
    assert printer_cli.main(["--check"]) == 0
    assert printer_cli.main(["--drawer"]) == 0
    network.cashdraw.assert_called_once_with(2)
    assert printer_cli.main(["--test"]) == 0
    network.open.side_effect = OSError("offline")
    assert printer_cli.main(["--check"]) == 1


@pytest.mark.parametrize(
    "value, expected",
    [("10.0.0.1:9200", ("10.0.0.1", 9200)), (":9200", ("192.168.1.100", 9200)), ("10.0.0.1:", ("10.0.0.1", 9100))],
)
def test_parse_address(value, expected):
    assert printer_cli.parse_address(value, "192.168.1.100", 9100) == expected


@pytest.mark.parametrize("value", ["10.0.0.1", "host:abc", "host:70000"])
def test_parse_address_errors(value):
    with pytest.raises(ValueError):
        printer_cli.parse_address(value, "h", 1)


def test_bad_printer_override(network):
    assert printer_cli.main(["--test", "--printer", "nohost"]) == 2
