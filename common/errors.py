"""Error types shared by the HTTP layer, the CLI and the printer driver."""


class OrderValidationError(ValueError):
    """The order payload cannot be printed (not an object, no items...)."""


class PrinterConnectionError(RuntimeError):
    """The printer could not be reached."""


class PrinterTransmissionError(RuntimeError):
    """Sending directives failed after the connection was opened.

    Whatever reached the printer before the failure stays printed.
    """


__all__ = [
    "OrderValidationError",
    "PrinterConnectionError",
    "PrinterTransmissionError",
]
