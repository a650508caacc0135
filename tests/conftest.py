import os
import tempfile
from pathlib import Path

# Keep the settings file out of the source tree and ignore a developer .env.
_SETTINGS_DIR = tempfile.mkdtemp(prefix="ticket-printer-tests-")
os.environ["PRINTER_SETTINGS_FILE"] = str(Path(_SETTINGS_DIR) / "settings.json")
for _name in ("PRINTER_IP", "PRINTER_PORT", "PRINTER_TIMEOUT", "TICKET_PROFILE", "SERVICE_PORT", "LOG_LEVEL"):
    os.environ.pop(_name, None)

from unittest.mock import MagicMock

import pytest

from common.interface import Order
from printer import driver


@pytest.fixture
def order_payload():
    return {
        "deliveryHour": "21:30",
        "client": "Juan Perez",
        "printComment": "",
        "total": "$25.400",
        "date": "19/10/2026 21:05",
        "isDelivery": False,
        "payments": {"cash": 0, "transfer": 0, "card": 0},
        "items": [
            {
                "name": "Doble Cheddar",
                "recipe_id": 12,
                "quantity": 1,
                "total_price": 12700,
                "extra_bacon": True,
                "no_pepinos": True,
            },
            {
                "name": "Simple Clasica",
                "recipe_id": 4,
                "quantity": 2,
                "total_price": 12700,
            },
            {
                "name": "Extra bacon",
                "is_extra": True,
                "quantity": 1,
                "total_price": 0,
            },
        ],
    }


@pytest.fixture
def order(order_payload):
    return Order.from_dict(order_payload)


@pytest.fixture
def network(monkeypatch):
    """Replace escpos' Network printer with a mock and return the device."""
    device = MagicMock(name="NetworkDevice")
    factory = MagicMock(name="Network", return_value=device)
    monkeypatch.setattr(driver.escpos_printer, "Network", factory)
    device.factory = factory
    return device
