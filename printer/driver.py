"""Receipt printer driver targeting ESC/POS network thermal printers."""
from __future__ import annotations

import logging
import threading
from typing import Dict, Iterable, Optional, Tuple

from escpos import printer as escpos_printer

from common.errors import PrinterConnectionError, PrinterTransmissionError
from config import settings
from printer.directives import (
    Cut,
    Directive,
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

LOGGER = logging.getLogger(__name__)

_LOCKS: Dict[Tuple[str, int], threading.Lock] = {}
_LOCKS_GUARD = threading.Lock()


def _printer_lock(host: str, port: int) -> threading.Lock:
    with _LOCKS_GUARD:
        return _LOCKS.setdefault((host, port), threading.Lock())


class ReceiptPrinter:
    """Replays directive sequences on a raw TCP (port 9100) ESC/POS printer.

    Only one ReceiptPrinter may hold a connection to a given printer at a
    time; :meth:`connect` waits for the previous holder to disconnect.
    """

    def __init__(self, config: Optional[dict] = None) -> None:
        self.config = config or settings.PRINTER
        self.host = str(self.config.get("host") or "192.168.1.100")
        self.port = int(self.config.get("port") or 9100)
        self.timeout = float(self.config.get("timeout") or 10)
        self.device = None
        self._lock = _printer_lock(self.host, self.port)
        self._locked = False

    def connect(self):
        """Open the socket to the printer, or return the open device."""
        if self.device is not None:
            return self.device

        self._lock.acquire()
        self._locked = True
        LOGGER.debug("Connecting to printer %s:%s", self.host, self.port)
        try:
            device = escpos_printer.Network(self.host, port=self.port, timeout=self.timeout)
            device.open()
        except Exception as exc:
            self._release()
            LOGGER.exception("Unable to connect to printer %s:%s", self.host, self.port)
            raise PrinterConnectionError(
                f"Failed to connect to printer at {self.host}:{self.port}"
            ) from exc

        self.device = device
        return self.device

    def send(self, directives: Iterable[Directive]) -> None:
        """Execute ``directives`` in order on the printer.

        A failure halfway leaves the already printed part on paper.
        """
        device = self.connect()
        for index, directive in enumerate(directives):
            try:
                self._apply(device, directive)
            except Exception as exc:
                LOGGER.exception("Failed to send directive #%d (%r)", index, directive)
                raise PrinterTransmissionError("Failed to send data to printer") from exc

    def _apply(self, device, directive: Directive) -> None:
        if isinstance(directive, Text):
            device.textln(directive.content)
        elif isinstance(directive, Feed):
            if directive.lines > 0:
                device.text("\n" * int(directive.lines))
        elif isinstance(directive, SetAlign):
            device.set(align=directive.align)
        elif isinstance(directive, SetStyle):
            device.set(bold=directive.style == "bold")
        elif isinstance(directive, SetFont):
            device.set(font=directive.font)
        elif isinstance(directive, SetSize):
            if directive.width == 1 and directive.height == 1:
                device.set(normal_textsize=True)
            else:
                device.set(custom_size=True, width=directive.width, height=directive.height)
        elif isinstance(directive, Encode):
            device.charcode(directive.codepage.upper())
        elif isinstance(directive, RawBytes):
            device._raw(directive.data)
        elif isinstance(directive, Cut):
            device.cut()
        elif isinstance(directive, OpenCashDrawerPulse):
            device.cashdraw(directive.pin)
        elif isinstance(directive, HardwareInit):
            device.hw("INIT")
        else:
            raise TypeError(f"Unsupported directive: {directive!r}")

    def is_online(self) -> bool:
        """Open and close a connection to check the printer is reachable."""
        try:
            self.connect()
        except PrinterConnectionError:
            return False
        finally:
            self.disconnect()
        return True

    def kick_drawer(self, pin: int = 2) -> None:
        """Kick the cash drawer."""
        self.send([OpenCashDrawerPulse(pin)])

    def disconnect(self) -> None:
        if self.device is not None:
            close_fn = getattr(self.device, "close", None)
            if callable(close_fn):
                try:
                    close_fn()
                except Exception:  # pragma: no cover - best-effort cleanup
                    LOGGER.debug("Failed to close printer device", exc_info=True)
            self.device = None
        self._release()

    def _release(self) -> None:
        if self._locked:
            self._locked = False
            self._lock.release()

    def __enter__(self) -> "ReceiptPrinter":
        self.connect()
        return self

    def __exit__(self, *exc_info) -> None:
        self.disconnect()


__all__ = ["ReceiptPrinter"]
