"""Ticket layout profiles."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict

MODIFIER_STYLES = ("inline", "columns")


@dataclass(frozen=True)
class LayoutConfig:
    name: str
    column_width: int
    encoding: str
    modifier_style: str = "inline"
    papas_suffix: bool = True
    no_cheddar_token: str = "s/ch"
    cash_highlight: bool = False
    rule_width: int = 32
    show_unit_price: bool = False

    def __post_init__(self) -> None:
        if self.modifier_style not in MODIFIER_STYLES:
            raise ValueError(f"Unknown modifier style: {self.modifier_style}")
        if self.column_width <= 0 or self.rule_width <= 0:
            raise ValueError("Layout widths must be positive")

    def with_overrides(self, **changes) -> "LayoutConfig":
        return replace(self, **changes)


# Counter printer, font B on 80mm paper.
CLASSIC = LayoutConfig(
    name="classic",
    column_width=48,
    encoding="cp858",
    modifier_style="inline",
    papas_suffix=True,
    no_cheddar_token="s/ch",
    cash_highlight=True,
)

WIDE = LayoutConfig(
    name="wide",
    column_width=64,
    encoding="cp850",
    modifier_style="columns",
    papas_suffix=False,
    no_cheddar_token="s/pp",
    cash_highlight=False,
)

PROFILES: Dict[str, LayoutConfig] = {
    CLASSIC.name: CLASSIC,
    WIDE.name: WIDE,
}

DEFAULT_PROFILE = CLASSIC.name


def get_layout(name: str | None = None) -> LayoutConfig:
    """Return the named profile; ``None`` or an empty name gives the default."""
    key = (name or DEFAULT_PROFILE).strip().lower()
    try:
        return PROFILES[key]
    except KeyError:
        raise KeyError(f"Unknown ticket profile: {name}") from None


__all__ = ["LayoutConfig", "PROFILES", "CLASSIC", "WIDE", "DEFAULT_PROFILE", "get_layout"]
