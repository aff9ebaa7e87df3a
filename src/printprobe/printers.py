"""Canonicalisation of free-text printer identifiers.

Slicers write printer names in whatever form the user's profile happens to
use (``"Original Prusa i3 MK3S+ 0.4 nozzle"``, ``"Bambu Lab X1 Carbon 0.4
nozzle"``, ``"Ender-3 V2"``...).  :func:`normalize_printer` maps such a string
to a :class:`~printprobe.models.PrinterInfo` with a canonical brand and, where
the model can be told apart, a canonical name.

The rules are plain ordered data.  Brands are tried top to bottom, then the
brand's models top to bottom, and the first satisfied predicate wins.  More
specific predicates must therefore come before generic ones (``x1`` must not
pre-empt ``x1 carbon``).

Example::

    >>> normalize_printer("Bambu Lab X1 Carbon 0.4 nozzle")
    PrinterInfo(name='X1 Carbon', brand='Bambu Lab', ...)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from printprobe.models import PrinterInfo

GENERIC_BRAND = "Generic"

Predicate = Callable[[str], bool]


def contains(*tokens: str) -> Predicate:
    """Predicate satisfied when every token occurs in the lowercased text."""

    def _check(text: str) -> bool:
        return all(token in text for token in tokens)

    return _check


def either(*predicates: Predicate) -> Predicate:
    """Predicate satisfied when any of *predicates* is."""

    def _check(text: str) -> bool:
        return any(p(text) for p in predicates)

    return _check


@dataclass(frozen=True)
class ModelRule:
    """Maps a predicate over the lowercased identifier to a model name."""

    matches: Predicate
    name: str


@dataclass(frozen=True)
class BrandRule:
    """A brand plus its ordered model rules.

    When no model rule matches, the raw identifier is kept as the name.
    """

    matches: Predicate
    brand: str
    models: tuple[ModelRule, ...] = ()

    def build(self, raw: str, lowered: str) -> PrinterInfo:
        for rule in self.models:
            if rule.matches(lowered):
                return PrinterInfo(name=rule.name, brand=self.brand)
        return PrinterInfo(name=raw, brand=self.brand)


PRINTER_RULES: tuple[BrandRule, ...] = (
    BrandRule(
        contains("prusa"),
        "Prusa Research",
        (
            ModelRule(contains("mk3"), "i3 MK3S+"),
            ModelRule(contains("mk4"), "MK4"),
            ModelRule(contains("mini"), "MINI+"),
            ModelRule(contains("xl"), "XL"),
        ),
    ),
    BrandRule(
        contains("bambu"),
        "Bambu Lab",
        (
            ModelRule(either(contains("x1", "carbon"), contains("x1c")), "X1 Carbon"),
            ModelRule(contains("x1e"), "X1E"),
            ModelRule(contains("x1"), "X1"),
            ModelRule(either(contains("a1", "mini"), contains("a1m")), "A1 mini"),
            ModelRule(contains("a1", "combo"), "A1 Combo"),
            ModelRule(contains("a1"), "A1"),
            ModelRule(contains("p1s"), "P1S"),
            ModelRule(either(contains("p1p"), contains("p1")), "P1P"),
        ),
    ),
    BrandRule(contains("ender"), "Creality"),
)


def normalize_printer(
    raw: str,
    rules: tuple[BrandRule, ...] = PRINTER_RULES,
) -> PrinterInfo:
    """Map a raw printer identifier to a canonical :class:`PrinterInfo`.

    Never raises: an identifier no rule recognises comes back with brand
    ``"Generic"`` and the raw text as its name.
    """
    raw = (raw or "").strip()
    lowered = raw.lower()
    for rule in rules:
        if rule.matches(lowered):
            return rule.build(raw, lowered)
    return PrinterInfo(name=raw, brand=GENERIC_BRAND)
