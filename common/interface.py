from dataclasses import dataclass, field
from typing import Any, Optional

from common.errors import OrderValidationError
from printer.utils import to_integer, to_number

FLAG_NAMES = (
    "extra_medallon",
    "extra_2medallones",
    "extra_cheddar",
    "extra_bacon",
    "extra_papas",
    "bbq",
    "no_salsa",
    "no_cheddar",
    "no_pepinos",
    "no_tomate",
    "no_lechuga",
    "no_bacon",
)


@dataclass(frozen=True)
class LineItem:
    name: str = ""
    is_extra: bool = False
    recipe_id: Optional[Any] = None
    quantity: int = 1
    total_price: float = 0.0

    extra_medallon: bool = False
    extra_2medallones: bool = False
    extra_cheddar: bool = False
    extra_bacon: bool = False
    extra_papas: bool = False
    bbq: bool = False
    no_salsa: bool = False
    no_cheddar: bool = False
    no_pepinos: bool = False
    no_tomate: bool = False
    no_lechuga: bool = False
    no_bacon: bool = False

    @property
    def unit_price(self) -> float:
        if not self.quantity:
            return 0.0
        return self.total_price / self.quantity

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "LineItem":
        """Create a LineItem from a JSON item, accepting the legacy 'nombre' key."""
        if not isinstance(payload, dict):
            raise OrderValidationError("Each item must be an object")

        name = payload.get("name")
        if name is None:
            name = payload.get("nombre")

        quantity = payload.get("quantity")
        flags = {flag: bool(payload.get(flag)) for flag in FLAG_NAMES}

        return cls(
            name="" if name is None else str(name),
            is_extra=bool(payload.get("is_extra")),
            recipe_id=payload.get("recipe_id") or None,
            quantity=1 if quantity is None else to_integer(quantity),
            total_price=to_number(payload.get("total_price", 0)),
            **flags,
        )


@dataclass(frozen=True)
class Payments:
    cash: float = 0.0
    transfer: float = 0.0
    card: float = 0.0

    @classmethod
    def from_dict(cls, payload: Optional[dict[str, Any]]) -> "Payments":
        if not isinstance(payload, dict):
            return cls()
        return cls(
            cash=to_number(payload.get("cash", 0)),
            transfer=to_number(payload.get("transfer", 0)),
            card=to_number(payload.get("card", 0)),
        )


@dataclass(frozen=True)
class Order:
    items: tuple[LineItem, ...]
    delivery_hour: str = ""
    client: str = ""
    print_comment: str = ""
    total: str = ""
    payments: Payments = field(default_factory=Payments)
    date: str = ""
    is_delivery: bool = False

    @property
    def countable_items(self) -> tuple[LineItem, ...]:
        return tuple(item for item in self.items if not item.is_extra)

    @classmethod
    def from_dict(cls, payload: Any) -> "Order":
        """Create an Order from the JSON body posted to /imprimir.

        Only the item list is mandatory; every other field falls back to an
        empty value so a partially filled order still prints.
        """

        # validation
        if not isinstance(payload, dict):
            raise OrderValidationError("Order must be a JSON object")

        raw_items = payload.get("items")
        if not isinstance(raw_items, list) or not raw_items:
            raise OrderValidationError("Field 'items' is required and must be a non-empty list")

        items = tuple(LineItem.from_dict(item) for item in raw_items)

        return cls(
            items=items,
            delivery_hour=_to_text(payload.get("deliveryHour")),
            client=_to_text(payload.get("client")),
            print_comment=_to_text(payload.get("printComment")),
            total=_to_text(payload.get("total")),
            payments=Payments.from_dict(payload.get("payments")),
            date=_to_text(payload.get("date")),
            is_delivery=bool(payload.get("isDelivery")),
        )


def _to_text(value) -> str:
    if value is None:
        return ""
    return str(value)
