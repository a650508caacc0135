"""Flask application exposing the ticket printer endpoints."""
from __future__ import annotations

import json
import logging

from flask import Blueprint, Flask, jsonify, request
from flask_cors import CORS

from common.errors import OrderValidationError, PrinterConnectionError, PrinterTransmissionError
from common.interface import Order
from config import settings
from printer.driver import ReceiptPrinter
from printer.layout import get_layout
from printer.template import build_drawer_pulse, build_test_page, build_ticket

LOGGER = logging.getLogger(__name__)

printer_bp = Blueprint("printer", __name__)


def _reply(ok: bool, message: str, status: int = 200):
    return jsonify({"ok": ok, "message": message}), status


@printer_bp.route("/health", methods=["GET"])
def health_check():
    return jsonify({"status": "ok"}), 200


@printer_bp.route("/imprimir", methods=["POST"])
def print_order():
    payload = request.get_json(force=True, silent=True)
    LOGGER.info("Order received for printing:\n%s", json.dumps(payload, indent=2, ensure_ascii=False))

    try:
        order = Order.from_dict(payload)
        layout = get_layout(request.args.get("perfil") or settings.LAYOUT.get("profile"))
    except (OrderValidationError, KeyError) as exc:
        LOGGER.warning("Rejected order: %s", exc)
        return _reply(False, "Pedido inválido", 400)

    try:
        directives = build_ticket(order, layout)
    except Exception:
        LOGGER.exception("Failed to compose ticket")
        return _reply(False, "Error interno del servidor", 500)

    printer = ReceiptPrinter(settings.PRINTER)
    try:
        printer.send(directives)
    except PrinterConnectionError as exc:
        LOGGER.error("Connection error: %s", exc)
        return _reply(False, "No se pudo conectar con la impresora", 500)
    except PrinterTransmissionError as exc:
        LOGGER.error("Error while printing: %s", exc)
        return _reply(False, "Error durante la impresión", 500)
    finally:
        printer.disconnect()

    return _reply(True, "Impresión exitosa")


@printer_bp.route("/impresora/test", methods=["GET"])
def printer_status():
    printer = ReceiptPrinter(settings.PRINTER)
    if not printer.is_online():
        return _reply(False, "Impresora OFFLINE", 500)
    return _reply(True, "Impresora ONLINE")


@printer_bp.route("/impresora/test-print", methods=["GET"])
def printer_test_print():
    printer = ReceiptPrinter(settings.PRINTER)
    try:
        printer.send(build_test_page())
    except PrinterConnectionError:
        LOGGER.error("Printer OFFLINE at %s:%s", printer.host, printer.port)
        return _reply(False, "No se pudo conectar con la impresora", 500)
    except PrinterTransmissionError:
        return _reply(False, "Error al imprimir", 500)
    finally:
        printer.disconnect()
    return _reply(True, "Impresora OK")


@printer_bp.route("/impresora/cajon", methods=["POST"])
def open_drawer():
    printer = ReceiptPrinter(settings.PRINTER)
    try:
        printer.send(build_drawer_pulse())
    except PrinterConnectionError:
        return _reply(False, "No se pudo conectar con la impresora", 500)
    except PrinterTransmissionError:
        return _reply(False, "No se pudo abrir el cajón", 500)
    finally:
        printer.disconnect()
    return _reply(True, "Cajón abierto")


def create_app() -> Flask:
    app = Flask(__name__)
    app.json.ensure_ascii = False
    CORS(app)
    app.register_blueprint(printer_bp)
    return app
