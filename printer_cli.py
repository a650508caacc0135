"""Command-line interface for printing burger orders."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from copy import deepcopy
from pathlib import Path
from typing import Optional

from common.interface import Order
from config import settings
from printer.driver import ReceiptPrinter
from printer.layout import PROFILES, get_layout
from printer.renderer import render_ticket_image
from printer.template import build_drawer_pulse, build_test_page, build_ticket
from server.app import create_app


def parse_arguments(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="printer",
        description="Network ticket printer CLI"
    )
    parser.add_argument(
        "--payload",
        required=False,
        help="JSON order string or path to a JSON file matching the /imprimir body",
    )
    parser.add_argument(
        "--profile",
        choices=sorted(PROFILES),
        help="Ticket layout profile (defaults to the configured one)",
    )
    parser.add_argument(
        "--printer",
        help="Override printer address as 'HOST:PORT' (e.g., 192.168.1.100:9100)",
    )
    parser.add_argument(
        "--preview",
        metavar="PNG",
        help="Render the ticket to an image instead of printing it",
    )
    parser.add_argument(
        "--test",
        action="store_true",
        help="Print the calibration test page",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Check whether the printer is reachable",
    )
    parser.add_argument(
        "--drawer",
        action="store_true",
        help="Open the cash drawer",
    )
    parser.add_argument(
        "--serve",
        nargs="?",
        const="",
        help="Run the Flask API server (optionally specify host:port)",
    )
    return parser.parse_args(argv)

def load_payload(payload_arg: str) -> dict:
    path = Path(payload_arg)
    try:
        is_file = path.is_file()
    except OSError:  # inline JSON longer than a file name
        is_file = False
    if is_file:
        try:
            with path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Failed to parse JSON file: {exc}") from exc
    try:
        return json.loads(payload_arg)
    except json.JSONDecodeError as exc:
        raise ValueError("Payload must be valid JSON or a readable JSON file path") from exc

def parse_address(value: str, default_host: str, default_port: int) -> tuple[str, int]:
    if ":" not in value:
        raise ValueError("Address must follow 'HOST:PORT' format")

    host, port_str = value.split(":", 1)
    host = host or default_host
    if not port_str:
        return host, default_port
    try:
        port = int(port_str)
    except ValueError as exc:
        raise ValueError("Port must be an integer") from exc
    if port <= 0 or port > 65535:
        raise ValueError("Port must be between 1 and 65535")
    return host, port

def configure_printer(address: Optional[str]) -> dict:
    printer_cfg = deepcopy(settings.PRINTER)
    if address:
        host, port = parse_address(address, printer_cfg.get("host"), printer_cfg.get("port", 9100))
        printer_cfg["host"] = host
        printer_cfg["port"] = port
    return printer_cfg

def parse_serve_address(value: Optional[str]) -> tuple[str, int]:
    default_host = settings.SERVICE.get("host", "0.0.0.0")
    default_port = settings.SERVICE.get("port", 3000)

    if value in (None, ""): return default_host, default_port
    return parse_address(value, default_host, default_port)


def _send(printer_config: dict, directives, success: str) -> int:
    printer = ReceiptPrinter(printer_config)
    try:
        printer.send(directives)
    except RuntimeError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1
    finally:
        printer.disconnect()
    print(f"[OK] {success}")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_arguments(argv)
    logging.basicConfig(level=settings.SERVICE.get("log_level", "INFO"))

    if args.serve is not None:
        try:
            host, port = parse_serve_address(args.serve)
        except ValueError as exc:
            print(f"[ERROR] {exc}", file=sys.stderr)
            return 2

        app = create_app()
        debug = settings.SERVICE.get("debug", False)
        app.run(host=host, port=port, debug=debug)
        return 0

    try:
        printer_config = configure_printer(args.printer)
    except ValueError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 2

    if args.check:
        printer = ReceiptPrinter(printer_config)
        if not printer.is_online():
            print(f"[ERROR] Printer OFFLINE at {printer.host}:{printer.port}", file=sys.stderr)
            return 1
        print(f"[OK] Printer ONLINE at {printer.host}:{printer.port}")
        return 0

    if args.drawer:
        return _send(printer_config, build_drawer_pulse(), "Cash drawer opened successfully")

    if args.test:
        return _send(printer_config, build_test_page(), "Test page printed successfully")

    if not args.payload:
        print("[ERROR] --payload is required unless --serve, --check, --drawer or --test is used", file=sys.stderr)
        return 2

    try:
        order = Order.from_dict(load_payload(args.payload))
        layout = get_layout(args.profile or settings.LAYOUT.get("profile"))
    except (ValueError, KeyError) as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 2

    directives = build_ticket(order, layout)

    if args.preview:
        render_ticket_image(directives, path=args.preview)
        print(f"[OK] Preview written to {args.preview}")
        return 0

    return _send(printer_config, directives, "Order printed successfully")


if __name__ == "__main__":
    sys.exit(main())
