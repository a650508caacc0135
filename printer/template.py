"""Ticket composition: turns an order into printer directives."""
from __future__ import annotations

import math
from typing import List, Tuple

from common.errors import OrderValidationError
from common.interface import LineItem, Order
from printer import utils
from printer.directives import (
    Cut,
    Directive,
    DirectiveSequence,
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
from printer.layout import LayoutConfig, get_layout
from printer.naming import display_name, extract_modifiers

# GS B n: white-on-black printing on/off.
REVERSE_ON = b"\x1d\x42\x01"
REVERSE_OFF = b"\x1d\x42\x00"
# Sent before the final cut; positions the paper on the counter printer.
TICKET_TRAILER = b"\x1b\x42\x03\x02"

CASH_LABEL = "Efectivo: "
TRANSFER_LABEL = "Tranferencia: "
CARD_LABEL = "Tarjeta: "

TEST_PAGE_TITLE = "*** PRUEBA DE IMPRESORA ***"
FONT_A_COLUMNS = 48
FONT_B_COLUMNS = 64


def count_bags(order: Order) -> int:
    """Delivery bags needed for ``order``: two burgers per bag.

    Counts line items, not units: a line with quantity 3 fills one slot.
    """
    return math.ceil(len(order.countable_items) / 2)


def modifier_line(modifiers: List[str], exclusions: List[str], layout: LayoutConfig) -> str:
    mods = " ".join(modifiers)
    excl = " ".join(exclusions)
    if layout.modifier_style == "columns":
        return utils.format_line(f"  {mods}", excl, layout.column_width)
    return f"  {mods} {excl}"


def _reset(sequence: DirectiveSequence, layout: LayoutConfig) -> None:
    sequence.extend([
        HardwareInit(),
        Encode(layout.encoding),
        SetFont("a"),
        SetSize(1, 1),
        SetAlign("center"),
        SetStyle("bold"),
    ])


def _header(sequence: DirectiveSequence, order: Order) -> None:
    sequence.extend([
        Text(order.delivery_hour),
        Feed(1),
        SetFont("b"),
        SetSize(1, 1),
        SetStyle("bold"),
        Text(order.client),
    ])
    if order.print_comment:
        sequence.extend([
            Feed(1),
            SetAlign("left"),
            Text(f"OBS: {order.print_comment}"),
            SetAlign("center"),
        ])


def _item(sequence: DirectiveSequence, item: LineItem, layout: LayoutConfig) -> None:
    modifiers, exclusions = extract_modifiers(item, layout)
    name = display_name(item, layout)
    if layout.show_unit_price:
        name = utils.format_line(name, utils.format_currency(item.unit_price), layout.column_width)

    for _ in range(item.quantity):
        sequence.append(Text(name))
        if modifiers or exclusions:
            sequence.append(Text(modifier_line(modifiers, exclusions, layout)))
    sequence.append(Feed(1))


def _cash_line(order: Order) -> str:
    return CASH_LABEL + utils.format_currency(order.payments.cash)


def _payments(sequence: DirectiveSequence, order: Order, layout: LayoutConfig) -> None:
    payments = order.payments
    if payments.cash > 0:
        if layout.cash_highlight:
            sequence.extend([RawBytes(REVERSE_ON), Text(_cash_line(order)), RawBytes(REVERSE_OFF)])
        else:
            sequence.append(Text(_cash_line(order)))
        sequence.append(Feed(1))
    if payments.transfer > 0:
        sequence.extend([Text(TRANSFER_LABEL + utils.format_currency(payments.transfer)), Feed(1)])
    if payments.card > 0:
        sequence.extend([Text(CARD_LABEL + utils.format_currency(payments.card)), Feed(1)])


def _bag_ticket(sequence: DirectiveSequence, order: Order) -> None:
    sequence.extend([
        Feed(3),
        SetFont("a"),
        SetSize(1, 2),
        SetStyle("bold"),
        SetAlign("center"),
        Text(order.client),
        Feed(1),
    ])
    if order.payments.cash > 0:
        sequence.append(Text(_cash_line(order)))
    sequence.extend([Feed(3), Cut()])


def build_ticket(order: Order, layout: LayoutConfig | None = None) -> Tuple[Directive, ...]:
    """Compose the full receipt for ``order``.

    The main ticket comes first; delivery orders get one reduced bag ticket
    per bag after it, each cut separately.
    """
    if not order.items:
        raise OrderValidationError("Order has no items")
    layout = layout or get_layout()
    rule = utils.add_divider("-", layout.rule_width)

    sequence = DirectiveSequence()
    _reset(sequence, layout)
    _header(sequence, order)
    sequence.extend([Text(rule), SetAlign("left")])

    for item in order.countable_items:
        _item(sequence, item, layout)

    sequence.extend([
        Text(rule),
        SetAlign("right"),
        SetStyle("bold"),
        Text(f"TOTAL: {order.total}"),
        Feed(1),
    ])
    _payments(sequence, order, layout)
    sequence.extend([
        SetStyle("normal"),
        Feed(1),
        SetAlign("left"),
        Text(order.date),
        Feed(2),
        RawBytes(TICKET_TRAILER),
        Cut(),
    ])

    if order.is_delivery:
        for _ in range(count_bags(order)):
            _bag_ticket(sequence, order)

    return sequence.finalize()


def build_test_page() -> Tuple[Directive, ...]:
    """Calibration ticket with one full-width rule per font."""
    sequence = DirectiveSequence([
        HardwareInit(),
        SetAlign("center"),
        SetStyle("bold"),
        Text(TEST_PAGE_TITLE),
        Feed(1),
        Text(utils.add_divider("-", FONT_A_COLUMNS)),
        Feed(1),
        SetFont("a"),
        Text(utils.add_divider("-", FONT_B_COLUMNS)),
        Feed(2),
        Cut(),
    ])
    return sequence.finalize()


def build_drawer_pulse(pin: int = 2) -> Tuple[Directive, ...]:
    return DirectiveSequence([HardwareInit(), OpenCashDrawerPulse(pin)]).finalize()
