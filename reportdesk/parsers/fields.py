"""Pattern-driven field extraction shared by the daily and weekly parsers.

A field is described by a ``FieldSpec``: an ordered tuple of candidate
patterns, most specific phrasing first. ``extract`` returns the first match
that survives coercion, or ``None``. Nothing in this module raises on
malformed report text; absence is the only failure mode.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable

# Reusable regex fragments
NUMBER = r"\d[\d,]*(?:\.\d+)?"
PRICE = rf"\$?\s*({NUMBER})"
BOLD = r"\**"
SIGNAL_EMOJI = "🟢🟡🟠🔴"

_MARKUP = re.compile(r"[*_`]+")
_SPACES = re.compile(r"\s+")
_LEADING_EMOJI = re.compile(r"^[^\w$(\[\"'-]+")
_BULLET = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s+(.+?)\s*$")
_TABLE_SEPARATOR = re.compile(r"^\|?[\s:|-]+\|?$")

_DATE_FORMATS = (
    "%Y-%m-%d",
    "%B %d, %Y",
    "%B %d %Y",
    "%b %d, %Y",
    "%b %d %Y",
    "%m/%d/%Y",
    "%d %B %Y",
)

_VOLUME_MULTIPLIERS = {"K": 1e3, "M": 1e6, "B": 1e9}


# ── Coercion ─────────────────────────────────────────────────


def to_float(raw: Any) -> float | None:
    """Parse a signed number, tolerating ``$``, ``,``, ``+`` and markdown."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = _MARKUP.sub("", str(raw)).replace("$", "").replace(",", "").replace("%", "")
        text = text.replace("−", "-").replace("+", "").strip()
        try:
            value = float(text)
        except ValueError:
            return None
    if value != value or value in (float("inf"), float("-inf")):
        return None
    return value


def to_price(raw: Any) -> float | None:
    """Price → positive float, else None."""
    value = to_float(raw)
    if value is None or value <= 0:
        return None
    return value


def to_percent(raw: Any) -> float | None:
    """Percentage → signed float (``"-4.17%"`` → -4.17)."""
    return to_float(raw)


def to_int(raw: Any) -> int | None:
    value = to_float(raw)
    return int(value) if value is not None else None


def to_volume(raw: Any) -> float | None:
    """Volume with optional K/M/B suffix (``"98.5M"`` → 98500000.0)."""
    if raw is None:
        return None
    text = str(raw).strip().upper()
    multiplier = 1.0
    if text and text[-1] in _VOLUME_MULTIPLIERS:
        multiplier = _VOLUME_MULTIPLIERS[text[-1]]
        text = text[:-1]
    value = to_price(text)
    return value * multiplier if value is not None else None


def to_date(raw: Any) -> date | None:
    """Calendar date from ISO or common written forms."""
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    text = _SPACES.sub(" ", _MARKUP.sub("", str(raw))).strip().rstrip(".")
    text = re.sub(r"(\d)(st|nd|rd|th)\b", r"\1", text)
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def to_label(raw: Any) -> str | None:
    """Free text with markup removed and whitespace collapsed."""
    if raw is None:
        return None
    text = strip_markup(str(raw))
    return text or None


# ── Field specs ──────────────────────────────────────────────


@dataclass(frozen=True)
class FieldPattern:
    regex: re.Pattern
    group: int | str = 1
    coerce: Callable[[Any], Any] = to_label


@dataclass(frozen=True)
class FieldSpec:
    name: str
    patterns: tuple[FieldPattern, ...] = field(default_factory=tuple)


def pattern(regex: str, coerce: Callable[[Any], Any] = to_label, group: int | str = 1,
            flags: int = re.IGNORECASE) -> FieldPattern:
    return FieldPattern(regex=re.compile(regex, flags), group=group, coerce=coerce)


def extract(text: str | None, spec: FieldSpec) -> Any | None:
    """Return the first pattern match in ``text`` coerced to its type."""
    if not text:
        return None
    for candidate in spec.patterns:
        for match in candidate.regex.finditer(text):
            try:
                value = candidate.coerce(match.group(candidate.group))
            except (IndexError, TypeError, ValueError):
                value = None
            if value is not None:
                return value
    return None


def extract_match(text: str | None, spec: FieldSpec) -> re.Match | None:
    """Like ``extract`` but returns the raw match, for multi-group patterns."""
    if not text:
        return None
    for candidate in spec.patterns:
        match = candidate.regex.search(text)
        if match:
            return match
    return None


# ── Text helpers ─────────────────────────────────────────────


def strip_markup(text: str) -> str:
    return _SPACES.sub(" ", _MARKUP.sub("", text)).strip()


def strip_leading_emoji(text: str) -> str:
    return _LEADING_EMOJI.sub("", text).strip()


def bullet_items(text: str | None) -> list[str]:
    """Every bulleted or numbered line in ``text``, markup stripped."""
    if not text:
        return []
    items = []
    for line in text.splitlines():
        match = _BULLET.match(line)
        if match:
            item = strip_markup(match.group(1))
            if item:
                items.append(item)
    return items


def bullets_after(text: str | None, marker: str) -> list[str]:
    """The contiguous bullet list that follows the first line containing ``marker``."""
    if not text:
        return []
    lines = text.splitlines()
    needle = marker.casefold()
    for index, line in enumerate(lines):
        if needle not in strip_markup(line).casefold():
            continue
        items: list[str] = []
        for following in lines[index + 1:]:
            match = _BULLET.match(following)
            if match:
                items.append(strip_markup(match.group(1)))
            elif following.strip() or items:
                break
        return [item for item in items if item]
    return []


def table_rows(text: str | None) -> list[list[str]]:
    """Cells of every markdown table row in ``text``; separator rows skipped.

    Cells keep their markup so callers can still see emoji or bold markers.
    """
    if not text:
        return []
    rows = []
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped.startswith("|") or _TABLE_SEPARATOR.match(stripped):
            continue
        cells = [cell.strip() for cell in stripped.strip("|").split("|")]
        rows.append(cells)
    return rows


def tables(text: str | None) -> list[list[list[str]]]:
    """Group consecutive table rows into separate tables."""
    if not text:
        return []
    groups: list[list[list[str]]] = []
    current: list[str] = []
    for line in text.splitlines() + [""]:
        if line.strip().startswith("|"):
            current.append(line)
        elif current:
            groups.append(table_rows("\n".join(current)))
            current = []
    return [group for group in groups if group]


def table_value(text: str | None, label: str) -> str | None:
    """Second cell of the first two-column row whose first cell reads ``label``."""
    wanted = label.casefold()
    for cells in table_rows(text):
        if len(cells) >= 2 and strip_markup(cells[0]).casefold() == wanted:
            return cells[1]
    return None


def paragraphs(text: str | None) -> list[str]:
    """Prose paragraphs: no headings, bullets, tables, quotes-as-markup or rules."""
    if not text:
        return []
    result = []
    for block in re.split(r"\n\s*\n", text):
        lines = [
            line for line in block.splitlines()
            if line.strip()
            and not line.lstrip().startswith(("#", "|", "---", "<"))
            and not _BULLET.match(line)
        ]
        if lines:
            result.append(strip_markup(" ".join(line.strip().lstrip(">").strip() for line in lines)))
    return [p for p in result if p]
