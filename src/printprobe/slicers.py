"""Slicer identification from G-code headers and 3MF metadata.

:func:`detect_slicer` walks an ordered table of patterns and reports the
first one that matches anywhere in the content.  Results from different
rules are never merged.

Rule tiers, in order:

1. a known tool name followed by a version (``PrusaSlicer 2.7.0``,
   ``BambuStudio-01.08.04.51``)
2. a known tool name alone
3. XML ``<metadata name="slicer|application">`` values
4. ``generator`` / ``application`` / ``createdBy`` / ``tool`` keys whose
   quoted value mentions a slicer
5. a ``generated by <tool>`` comment
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from printprobe.models import SlicerInfo

logger = logging.getLogger(__name__)

# (pattern for the tool name, canonical name)
_KNOWN_SLICERS: tuple[tuple[str, str], ...] = (
    (r"PrusaSlicer", "PrusaSlicer"),
    (r"SuperSlicer", "SuperSlicer"),
    (r"OrcaSlicer", "OrcaSlicer"),
    (r"Bambu\s?Studio", "Bambu Studio"),
    (r"Cura(?:_SteamEngine)?", "Ultimaker Cura"),
    (r"Slic3r", "Slic3r"),
)

_VERSION = r"\d+(?:\.\d+)+"
_RE_VERSION = re.compile(rf"v?({_VERSION})", re.IGNORECASE)


@dataclass(frozen=True)
class SlicerRule:
    """One row of the slicer table.

    With a *canonical* name, a match yields that name and the first capture
    group (if any) as the version.  Without one, the captured raw value is
    split into name and version by :func:`split_name_version`.
    """

    pattern: re.Pattern[str]
    canonical: str | None = None

    def apply(self, content: str) -> SlicerInfo | None:
        m = self.pattern.search(content)
        if m is None:
            return None
        if self.canonical is not None:
            version = m.group(1) if self.pattern.groups else None
            return SlicerInfo(name=self.canonical, version=version)
        raw = m.group(1).strip()
        if not raw:
            return None
        return split_name_version(raw)


def _build_rules() -> tuple[SlicerRule, ...]:
    rules: list[SlicerRule] = []

    for name_re, canonical in _KNOWN_SLICERS:
        rules.append(
            SlicerRule(
                re.compile(rf"\b{name_re}[\s\-]+v?({_VERSION})", re.IGNORECASE),
                canonical,
            )
        )

    for name_re, canonical in _KNOWN_SLICERS:
        rules.append(SlicerRule(re.compile(rf"\b{name_re}\b", re.IGNORECASE), canonical))

    for key in ("slicer", "application"):
        rules.append(
            SlicerRule(
                re.compile(
                    rf"<metadata[^>]*name=[\"']{key}[\"'][^>]*?value=[\"']([^\"']+)[\"']",
                    re.IGNORECASE,
                )
            )
        )
    for key in ("slicer", "application"):
        rules.append(
            SlicerRule(
                re.compile(
                    rf"<metadata[^>]*name=[\"']{key}[\"'][^>]*>([^<]+)<",
                    re.IGNORECASE,
                )
            )
        )

    for key in ("generator", "application", "createdBy", "tool"):
        rules.append(
            SlicerRule(
                re.compile(
                    rf"{key}[^\n]*?[\"']([^\"'\n]*slic[^\"'\n]*)[\"']",
                    re.IGNORECASE,
                )
            )
        )

    rules.append(
        SlicerRule(re.compile(r";\s*generated\s+(?:by|with)\s+([^\n\r;,]+)", re.IGNORECASE))
    )
    return tuple(rules)


SLICER_RULES: tuple[SlicerRule, ...] = _build_rules()


def split_name_version(raw: str) -> SlicerInfo:
    """Split ``"MySlicer 1.2.3"`` into name and version.

    When *raw* holds no dotted number the whole value becomes the name.
    """
    m = _RE_VERSION.search(raw)
    if m is None:
        return SlicerInfo(name=raw.strip())
    name = raw[: m.start()].rstrip(" \t-_")
    return SlicerInfo(name=name or raw.strip(), version=m.group(1))


def detect_slicer(
    content: str,
    rules: tuple[SlicerRule, ...] = SLICER_RULES,
) -> SlicerInfo | None:
    """Identify the slicer named in *content*, or ``None``."""
    if not content:
        return None
    for rule in rules:
        info = rule.apply(content)
        if info is not None:
            logger.debug("Slicer rule %s matched: %s", rule.pattern.pattern, info.name)
            return info
    return None
