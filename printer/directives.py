"""Printer directives produced by the ticket composer.

A ticket is an ordered tuple of these values. The driver replays them one by
one on an ESC/POS device, so the order of the tuple is the order on paper.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

ALIGNMENTS = ("left", "center", "right")
STYLES = ("normal", "bold")
FONTS = ("a", "b")


class Directive:
    """Base class of every printer instruction."""

    __slots__ = ()


@dataclass(frozen=True)
class HardwareInit(Directive):
    pass


@dataclass(frozen=True)
class Encode(Directive):
    codepage: str


@dataclass(frozen=True)
class SetFont(Directive):
    font: str

    def __post_init__(self) -> None:
        if self.font not in FONTS:
            raise ValueError(f"Unknown font: {self.font}")


@dataclass(frozen=True)
class SetAlign(Directive):
    align: str

    def __post_init__(self) -> None:
        if self.align not in ALIGNMENTS:
            raise ValueError(f"Unknown alignment: {self.align}")


@dataclass(frozen=True)
class SetStyle(Directive):
    style: str

    def __post_init__(self) -> None:
        if self.style not in STYLES:
            raise ValueError(f"Unknown style: {self.style}")


@dataclass(frozen=True)
class SetSize(Directive):
    width: int = 1
    height: int = 1

    def __post_init__(self) -> None:
        if not (1 <= self.width <= 8 and 1 <= self.height <= 8):
            raise ValueError("Text size multipliers must be between 1 and 8")


@dataclass(frozen=True)
class Text(Directive):
    content: str


@dataclass(frozen=True)
class Feed(Directive):
    lines: int = 1


@dataclass(frozen=True)
class RawBytes(Directive):
    data: bytes


@dataclass(frozen=True)
class Cut(Directive):
    pass


@dataclass(frozen=True)
class OpenCashDrawerPulse(Directive):
    pin: int = 2

    def __post_init__(self) -> None:
        if self.pin not in (2, 5):
            raise ValueError("Invalid pin for cash drawer kick; must be 2 or 5")


class DirectiveSequence:
    """Append-only list of directives, frozen by :meth:`finalize`."""

    def __init__(self, directives: Optional[Iterable[Directive]] = None) -> None:
        self._items: List[Directive] = []
        self._final: Optional[Tuple[Directive, ...]] = None
        if directives:
            self.extend(directives)

    def append(self, directive: Directive) -> "DirectiveSequence":
        if self._final is not None:
            raise RuntimeError("Directive sequence already finalized")
        if not isinstance(directive, Directive):
            raise TypeError(f"Expected a Directive, got {type(directive).__name__}")
        self._items.append(directive)
        return self

    def extend(self, directives: Iterable[Directive]) -> "DirectiveSequence":
        for directive in directives:
            self.append(directive)
        return self

    def finalize(self) -> Tuple[Directive, ...]:
        if self._final is None:
            self._final = tuple(self._items)
        return self._final

    @property
    def finalized(self) -> bool:
        return self._final is not None

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Directive]:
        return iter(self._items)


__all__ = [
    "Directive",
    "HardwareInit",
    "Encode",
    "SetFont",
    "SetAlign",
    "SetStyle",
    "SetSize",
    "Text",
    "Feed",
    "RawBytes",
    "Cut",
    "OpenCashDrawerPulse",
    "DirectiveSequence",
]
