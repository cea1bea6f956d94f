"""Split report markdown into named sections.

Each document kind has its own heading vocabulary. A heading that matches the
vocabulary opens a section under its canonical name; any other heading is
kept as part of the section body it appears in. Sections that never appear
are simply absent from the result.
"""

from __future__ import annotations

import re

from reportdesk.schemas.report import ReportKind

_HEADING = re.compile(r"^\s{0,3}(#{1,6})\s+(.+?)\s*#*\s*$")
_NUMBERING = re.compile(r"^(?:\d+[.)]|[ivx]+\.)\s*")
_NON_WORD = re.compile(r"[^\w\s'&/+-]")
_SPACES = re.compile(r"\s+")

# canonical section name → heading patterns, matched at the start of the
# canonicalized heading text
DAILY_SECTIONS: dict[str, tuple[str, ...]] = {
    "header": (r"(?:\w+ )?daily report",),
    "executive summary": (r"executive summary", r"key metrics", r"price action"),
    "previous day": (r"previous day", r"yesterday"),
    "macro context": (r"qqq", r"macro context"),
    "mode": (r"regime status", r"mode\b", r"regime assessment"),
    "take": (r"\w+'s take", r"my take"),
    "entry quality": (r"should you be buying", r"entry quality"),
    "game plan": (r"(?:the )?game plan", r"bottom line"),
    "positioning": (r"position sizing", r"today's positioning", r"positioning", r"position guidance", r"position\b"),
    "levels map": (r"key levels", r"levels map"),
    "alerts": (r"alerts(?: to set)?\b",),
    "technical analysis": (r"technical analysis",),
    "discipline": (r"discipline", r"spotgamma"),
}

WEEKLY_SECTIONS: dict[str, tuple[str, ...]] = {
    "header": (r"(?:\w+ )?weekly review", r"week of\b"),
    "weekly candle": (r"weekly candle", r"week at a glance", r"the week in numbers", r"week stats"),
    "mode": (r"mode\b", r"\w+ mode\b"),
    "multi-timeframe": (r"multi-timeframe", r"timeframe", r"confluence"),
    "what happened": (r"what happened",),
    "what we learned": (r"what we learned", r"lessons learned\b"),
    "thesis check": (r"thesis check", r"thesis\b"),
    "looking ahead": (r"looking ahead", r"next week"),
    "key levels": (r"key levels", r"levels to watch"),
    "scenarios": (r"scenarios", r"scenario planning"),
    "catalysts": (r"catalysts", r"catalyst calendar", r"calendar"),
    "gamma context": (r"gamma context", r"gamma shifts"),
    "take": (r"\w+'s take", r"take\b", r"so what", r"bottom line"),
}

_VOCABULARIES: dict[ReportKind, list[tuple[str, re.Pattern]]] = {
    kind: [
        (name, re.compile(rf"^(?:{'|'.join(aliases)})"))
        for name, aliases in vocabulary.items()
    ]
    for kind, vocabulary in (
        (ReportKind.DAILY, DAILY_SECTIONS),
        (ReportKind.WEEKLY, WEEKLY_SECTIONS),
    )
}


def canonicalize(name: str) -> str:
    """Case-fold and normalize a heading or section name.

    ``"## 3. 🚦 Mode: 🟢 GREEN"`` → ``"mode green"``.
    """
    text = name.replace("’", "'").replace("‘", "'").casefold().lstrip("#").strip()
    text = _NUMBERING.sub("", text)
    text = _NON_WORD.sub(" ", text)
    return _SPACES.sub(" ", text).strip()


def match_heading(heading: str, kind: ReportKind | str) -> str | None:
    """Canonical section name for ``heading`` in ``kind``'s vocabulary."""
    canonical = canonicalize(heading)
    for name, regex in _VOCABULARIES[ReportKind(kind)]:
        if regex.match(canonical):
            return name
    return None


def split_sections(text: str, kind: ReportKind | str) -> dict[str, str]:
    """Map canonical section name → section body (heading line excluded)."""
    sections: dict[str, list[str]] = {}
    current: str | None = None
    for line in text.splitlines():
        heading = _HEADING.match(line)
        name = match_heading(heading.group(2), kind) if heading else None
        if name:
            current = name
            if name in sections:
                sections[name].append("")
            else:
                sections[name] = []
            continue
        if current:
            sections[current].append(line)
    return {name: "\n".join(lines).strip() for name, lines in sections.items()}
