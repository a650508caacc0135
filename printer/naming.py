"""Printable names and modifier abbreviations for burger line items.

Recipe items are renamed by patty count: "Doble Cheddar" with an extra
medallion prints as "Cheddar III". The lookup tables below are ordered; the
order is the order the tokens appear on paper, so existing receipts keep
their exact format.
"""
from __future__ import annotations

import re
from typing import List, Tuple

from common.interface import LineItem
from printer.layout import LayoutConfig

ROMAN_NUMERALS: Tuple[Tuple[int, str], ...] = (
    (1, "I"),
    (2, "II"),
    (3, "III"),
    (4, "IV"),
    (5, "V"),
)

# Removed once each, in this order.
QUALIFIER_WORDS: Tuple[str, ...] = ("simple", "doble", "onion")

EXTRA_PAPAS_SUFFIX = " + EXTRA PAPAS"

_DOBLE = re.compile("doble", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")

MODIFIER_RULES: Tuple[Tuple[str, str], ...] = (
    ("extra_cheddar", "+ch"),
    ("extra_bacon", "+ba"),
    ("extra_papas", "+pp"),
    ("bbq", "+bbq"),
)

# A token of None means the layout decides.
EXCLUSION_RULES: Tuple[Tuple[str, str | None], ...] = (
    ("no_salsa", "s/s"),
    ("no_cheddar", None),
    ("no_pepinos", "s/pep"),
    ("no_tomate", "s/tom"),
    ("no_lechuga", "s/lech"),
    ("no_bacon", "s/ba"),
)


def to_roman(num: int) -> str:
    for value, numeral in ROMAN_NUMERALS:
        if value == num:
            return numeral
    return str(num)


def count_medallions(item: LineItem) -> int:
    count = 2 if _DOBLE.search(item.name) else 1
    if item.extra_medallon:
        count += 1
    if item.extra_2medallones:
        count += 2
    return count


def clean_name(name: str) -> str:
    for word in QUALIFIER_WORDS:
        name = re.sub(word, "", name, count=1, flags=re.IGNORECASE)
    return _WHITESPACE.sub(" ", name).strip()


def build_item_name(item: LineItem) -> str:
    return f"{clean_name(item.name)} {to_roman(count_medallions(item))}".strip()


def display_name(item: LineItem, layout: LayoutConfig) -> str:
    """Name printed for one unit of ``item``.

    Items without a recipe are custom entries and print exactly as typed.
    """
    if not item.recipe_id:
        return item.name
    name = build_item_name(item)
    if layout.papas_suffix and item.extra_papas:
        name += EXTRA_PAPAS_SUFFIX
    return name


def extract_modifiers(item: LineItem, layout: LayoutConfig) -> Tuple[List[str], List[str]]:
    modifiers: List[str] = []
    for flag, token in MODIFIER_RULES:
        if flag == "extra_papas" and layout.papas_suffix:
            continue
        if getattr(item, flag):
            modifiers.append(token)

    exclusions: List[str] = []
    for flag, token in EXCLUSION_RULES:
        if getattr(item, flag):
            exclusions.append(token or layout.no_cheddar_token)

    return modifiers, exclusions


__all__ = [
    "ROMAN_NUMERALS",
    "MODIFIER_RULES",
    "EXCLUSION_RULES",
    "EXTRA_PAPAS_SUFFIX",
    "to_roman",
    "count_medallions",
    "clean_name",
    "build_item_name",
    "display_name",
    "extract_modifiers",
]
