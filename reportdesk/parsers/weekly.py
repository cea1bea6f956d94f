"""Weekly review parser.

Weekly reviews use a different template from the daily report: a weekly
candle, a monthly/weekly/daily timeframe breakdown, narrative sections,
scenarios with probabilities and a catalyst calendar. Front matter values win
over prose, as in the daily parser.
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import NamedTuple

from reportdesk.core.modes import MODE_INFO, Mode, coerce_mode, daily_cap_for, default_mode
from reportdesk.parsers.fields import (
    BOLD,
    NUMBER,
    PRICE,
    SIGNAL_EMOJI,
    FieldSpec,
    bullets_after,
    extract,
    paragraphs,
    pattern,
    strip_markup,
    table_rows,
    tables,
    to_date,
    to_float,
    to_int,
    to_percent,
    to_price,
)
from reportdesk.parsers.frontmatter import FrontMatter, read_front_matter
from reportdesk.parsers.sections import canonicalize, split_sections
from reportdesk.schemas.report import ParserWarning, ReportKind, Severity, Signal
from reportdesk.schemas.weekly_review import (
    Catalyst,
    Confluence,
    ExtractedWeeklyReport,
    GammaShifts,
    KeyLevel,
    LevelShift,
    Lessons,
    MAPosition,
    Scenario,
    ScenarioType,
    ThesisCheck,
    ThesisStatus,
    TimeframeRead,
    WeeklyCandle,
)

logger = logging.getLogger(__name__)

WEEKLY_PARSER_VERSION = "1.1.0"

TIMEFRAMES = ("monthly", "weekly", "daily")

# Key level emoji → category
LEVEL_CATEGORIES: dict[str, str] = {
    "⚡": "breakout",
    "📈": "upside",
    "⏸️": "pause",
    "⏸": "pause",
    "🛡️": "support",
    "🛡": "support",
    "❌": "eject",
    "📍": "marker",
}

SCENARIO_EMOJI: dict[str, ScenarioType] = {
    "🐂": ScenarioType.BULL,
    "⚖️": ScenarioType.BASE,
    "⚖": ScenarioType.BASE,
    "🐻": ScenarioType.BEAR,
}

_WEEK_OF = re.compile(
    r"Week\s+of\s+(?P<m1>[A-Za-z]+)\.?\s+(?P<d1>\d{1,2})(?:st|nd|rd|th)?\s*[–—-]+\s*"
    r"(?:(?P<m2>[A-Za-z]+)\.?\s+)?(?P<d2>\d{1,2})(?:st|nd|rd|th)?,?\s*(?P<year>\d{4})",
    re.IGNORECASE,
)
_MODE_BANNER = re.compile(rf"[{SIGNAL_EMOJI}]?\s*{BOLD}(green|yellow|orange|red)\s*mode\b", re.IGNORECASE)
_GUIDANCE = re.compile(r"^[^\n]*daily\s*cap[^\n]*$", re.IGNORECASE | re.MULTILINE)
_THESIS_STATUS = re.compile(
    r"THESIS\s*\**\s*(INTACT|STRENGTHENING|WEAKENING|UNDER\s+REVIEW)"
    r"|Status\**\s*[:|]\s*\**\s*(?:[^\w\n]*\s*)?(INTACT|STRENGTHENING|WEAKENING|UNDER\s+REVIEW)",
    re.IGNORECASE,
)
_TREND_PATTERN = re.compile(r"\b(HH|HL|LH|LL)\b")
_QUOTED = re.compile(r"[\"“]([^\"”\n]{3,})[\"”]")
_PERCENT = re.compile(r"(\d{1,3})\s*%")
_LABELLED = re.compile(r"^\s*(?:[-*•]\s*)?\**(?P<label>trigger|if|response|action|plan)\**\s*[:|]\**\s*(?P<value>.+?)\s*$",
                       re.IGNORECASE | re.MULTILINE)
_SCENARIO_START = re.compile(
    r"^\s*(?:[-*•]|#{1,6}|\|)?\s*\**\s*(?P<emoji>🐂|⚖️|⚖|🐻)?\s*\**\s*(?P<word>bull|base|bear)?(?:\s*case)?\b",
    re.IGNORECASE,
)
_LEVEL_LINE = re.compile(
    rf"\$(?P<price>{NUMBER})\**\s*(?P<emoji>⚡|📈|⏸️|⏸|🛡️|🛡|❌|📍)\s*\**(?P<name>[^—–|\n]+?)\**\s*"
    r"(?:[—–]\s*(?P<description>[^\n|]+?))?\s*$",
    re.MULTILINE,
)
_CATALYST_LINE = re.compile(
    r"^\s*[-*•]\s*\**(?P<when>[^*:—–\n]+?)\**\s*[:—–-]\s*(?P<event>[^\n(]+?)\s*(?:\((?P<impact>[^)]+)\))?\s*$",
    re.MULTILINE,
)
_MONTH_DAY = re.compile(r"([A-Za-z]{3,9})\.?\s+(\d{1,2})(?:st|nd|rd|th)?\b")
_SCENARIO_NAMES = {kind.value for kind in ScenarioType}

DAILY_CAP_SPEC = FieldSpec("daily_cap_pct", (
    pattern(r"daily\s*cap\**\s*[:|]?\s*\**\s*(\d+(?:\.\d+)?)\s*%", to_float),
    pattern(r"(\d+(?:\.\d+)?)\s*%\s*daily\s*cap", to_float),
))

CANDLE_CHANGE_PCT_SPEC = FieldSpec("change_pct", (
    pattern(r"\bchange\b[^%\n]*?([+\-−]?\d+(?:\.\d+)?)\s*%", to_percent),
))

CANDLE_CHANGE_DOLLARS_SPEC = FieldSpec("change_dollars", (
    pattern(r"\bchange\b\**\s*[:|]?\s*\**\s*([+\-−]\s*\$?\s*\d+(?:\.\d+)?)(?![\d.]*\s*%)", lambda raw: to_float(raw.replace(" ", ""))),
))

CONFLUENCE_SPEC = FieldSpec("confluence", (
    pattern(r"Confluence(?:\s*Reading)?\**\s*[:|]\s*\**\s*([^\n|*]+)"),
    pattern(r"confluence-verdict[^>]*>([^<]+)"),
))


class WeeklyParseResult(NamedTuple):
    record: ExtractedWeeklyReport
    raw_text: str
    warnings: list[ParserWarning]

    @property
    def parser_version(self) -> str:
        return WEEKLY_PARSER_VERSION


def parse_weekly(text: str) -> WeeklyParseResult:
    """Parse a weekly review into its structured record plus warnings."""
    text = text or ""
    warnings: list[ParserWarning] = []

    def warn(field: str, message: str, severity: Severity = Severity.SOFT) -> None:
        warnings.append(ParserWarning(field=field, message=message, severity=severity))

    fm = read_front_matter(text)
    if fm.error:
        warn("frontmatter", fm.error)
    body = fm.body
    sections = split_sections(body, ReportKind.WEEKLY)

    week_start, week_end = _extract_week_dates(body, fm)
    if week_start is None:
        warn("week_start", "Could not extract week start date")
    if week_end is None:
        warn("week_end", "Could not extract week end date")

    mode = _extract_mode(body, sections, fm)
    if mode is None:
        mode = default_mode()
        warn("mode", f"No mode banner found; defaulting to {mode.value}")

    candle = _extract_candle(sections.get("weekly candle") or body, fm)
    if None in (candle.open, candle.high, candle.low, candle.close):
        warn("weekly_candle", "Could not extract complete candle data")

    timeframe_scope = sections.get("multi-timeframe") or body
    monthly, weekly, daily = (_parse_timeframe(timeframe_scope, tier, fm) for tier in TIMEFRAMES)

    what_happened = _narrative(sections.get("what happened"))
    if not what_happened:
        warn("what_happened", "No 'What Happened' narrative found")

    year = (week_end or week_start).year if (week_end or week_start) else None
    record = ExtractedWeeklyReport(
        week_start=week_start,
        week_end=week_end,
        mode=mode,
        mode_guidance=_extract_guidance(body, mode, fm),
        daily_cap_pct=_extract_daily_cap(body, mode, fm),
        weekly_candle=candle,
        monthly=monthly,
        weekly=weekly,
        daily=daily,
        confluence=_extract_confluence(timeframe_scope, monthly, weekly, daily),
        what_happened=what_happened,
        lessons=_extract_lessons(sections.get("what we learned") or body),
        thesis_check=_extract_thesis(sections.get("thesis check") or body, fm),
        looking_ahead=_narrative(sections.get("looking ahead")),
        key_levels=_extract_key_levels(sections.get("key levels") or body, fm),
        scenarios=_extract_scenarios(sections.get("scenarios") or body, fm),
        catalysts=_extract_catalysts(sections.get("catalysts", ""), year),
        gamma_shifts=_extract_gamma_shifts(sections.get("gamma context", "")),
        take=_narrative(sections.get("take")),
    )

    if warnings:
        logger.debug(f"Weekly parse produced {len(warnings)} warning(s): "
                     f"{', '.join(w.field for w in warnings)}")
    return WeeklyParseResult(record=record, raw_text=text, warnings=warnings)


def _narrative(section: str | None) -> str:
    """Readable prose of a section: HTML tags dropped, paragraphs kept."""
    if not section:
        return ""
    cleaned = re.sub(r"<[^>]+>", "", section)
    return "\n\n".join(paragraphs(cleaned)).strip()


# ── Header ───────────────────────────────────────────────────


def _extract_week_dates(body: str, fm: FrontMatter) -> tuple[date | None, date | None]:
    start, end = to_date(fm.get("week_start")), to_date(fm.get("week_end"))
    if start and end:
        return start, end

    match = _WEEK_OF.search(body)
    if not match:
        return start, end
    year = int(match.group("year"))
    end_month = match.group("m2") or match.group("m1")
    parsed_end = to_date(f"{end_month} {match.group('d2')} {year}")
    parsed_start = to_date(f"{match.group('m1')} {match.group('d1')} {year}")
    if parsed_start and parsed_end and parsed_start > parsed_end:
        # "Week of Dec 29 – Jan 2, 2026" starts in the previous year
        parsed_start = to_date(f"{match.group('m1')} {match.group('d1')} {year - 1}")
    return start or parsed_start, end or parsed_end


def _extract_mode(body: str, sections: dict[str, str], fm: FrontMatter) -> Mode | None:
    mode = coerce_mode(fm.get("mode"))
    if mode:
        return mode
    banner = _MODE_BANNER.search(body)
    if banner:
        return Mode(banner.group(1).lower())
    section = sections.get("mode")
    return coerce_mode(section.splitlines()[0]) if section else None


def _extract_guidance(body: str, mode: Mode, fm: FrontMatter) -> str:
    guidance = fm.get("mode_guidance")
    if guidance:
        return str(guidance).strip()
    banner = _MODE_BANNER.search(body)
    if banner:
        line = _GUIDANCE.search(body, banner.end())
        if line and line.start() - banner.end() < 400:
            return strip_markup(line.group(0)).lstrip("> ").strip()
    return MODE_INFO[mode].guidance


def _extract_daily_cap(body: str, mode: Mode, fm: FrontMatter) -> float:
    return daily_cap_for(mode, to_float(fm.get("daily_cap_pct")) or extract(body, DAILY_CAP_SPEC))


# ── Weekly candle ────────────────────────────────────────────


def _candle_stat(scope: str, label: str) -> float | None:
    spec = FieldSpec(label, (pattern(rf"(?<![\w-]){label}\b{BOLD}\s*[:|]?\s*{BOLD}\s*{PRICE}", to_price),))
    return extract(scope, spec)


def _extract_candle(scope: str, fm: FrontMatter) -> WeeklyCandle:
    stats = {label: to_price(fm.get(label)) for label in ("open", "high", "low", "close")}
    for label, value in stats.items():
        if value is None:
            stats[label] = _candle_stat(scope, label)

    change_dollars = to_float(fm.get("change_dollars"))
    if change_dollars is None:
        change_dollars = extract(scope, CANDLE_CHANGE_DOLLARS_SPEC)
    change_pct = to_percent(fm.get("change_pct"))
    if change_pct is None:
        change_pct = extract(scope, CANDLE_CHANGE_PCT_SPEC)

    open_, close = stats["open"], stats["close"]
    if change_dollars is None and open_ and close:
        change_dollars = round(close - open_, 2)
    if change_pct is None and open_ and change_dollars is not None:
        change_pct = round(change_dollars / open_ * 100, 2)
    return WeeklyCandle(**stats, change_dollars=change_dollars, change_pct=change_pct)


# ── Timeframes ───────────────────────────────────────────────


def _timeframe_block(scope: str, tier: str) -> str:
    """Heading line plus body of the ``tier`` subsection, or "" if absent."""
    block = re.search(
        rf"^[^\n]*#{{2,6}}[^\n]*\b{tier}\b[^\n]*\n.*?(?=^\s*#{{2,6}}\s|\Z)",
        scope,
        re.IGNORECASE | re.MULTILINE | re.DOTALL,
    )
    if block:
        return block.group(0)
    # table layout: one row per tier
    for cells in table_rows(scope):
        if cells and strip_markup(cells[0]).casefold().startswith(tier):
            return " | ".join(cells)
    return ""


def _row_value(block: str, label: str) -> str:
    for cells in table_rows(block):
        if len(cells) >= 2 and re.search(label, strip_markup(cells[0]), re.IGNORECASE):
            return cells[1]
    line = re.search(rf"{label}\**\s*[:]\s*([^\n|]+)", block, re.IGNORECASE)
    return line.group(1).strip() if line else ""


def _ma_position(text: str) -> MAPosition | None:
    lowered = text.casefold()
    if not lowered:
        return None
    if "below" in lowered or "⚠" in text or "❌" in text:
        return MAPosition.BELOW
    if "above" in lowered or "✅" in text:
        return MAPosition.ABOVE
    return None


def _parse_timeframe(scope: str, tier: str, fm: FrontMatter) -> TimeframeRead:
    """Read one timeframe tier; monthly, weekly and daily share this routine."""
    block = _timeframe_block(scope, tier)
    heading = block.splitlines()[0] if block else ""

    signal_mode = None
    for source in (fm.get(f"{tier}_signal"), heading, _row_value(block, "signal")):
        signal_mode = coerce_mode(str(source)) if source else None
        if signal_mode:
            break
    if signal_mode is None and block:
        css = re.search(r"signal-(green|yellow|orange|red)", block, re.IGNORECASE)
        signal_mode = coerce_mode(css.group(1)) if css else None
    signal = Signal(signal_mode.value) if signal_mode else Signal.YELLOW

    bx = strip_markup(_row_value(block, r"BX[- ]?Trender"))
    trend_color = "green" if "green" in bx.casefold() else "red" if "red" in bx.casefold() else ""
    trend_pattern = _TREND_PATTERN.search(bx)

    emas = {period: _ma_position(_row_value(block, rf"\b{period}\s*EMA")) for period in ("9", "21", "13")}

    interpretation = _QUOTED.search(block)
    if not interpretation:
        interpretation = re.search(r"^\s*>\s*(.+)$", block, re.MULTILINE)

    return TimeframeRead(
        signal=signal,
        trend_color=trend_color,
        trend_pattern=trend_pattern.group(1) if trend_pattern else "",
        structure=strip_markup(_row_value(block, "structure")),
        ema_9=emas["9"],
        ema_21=emas["21"],
        ema_13=emas["13"] if tier == "weekly" else None,
        interpretation=strip_markup(interpretation.group(1)) if interpretation else "",
    )


def _extract_confluence(scope: str, monthly: TimeframeRead, weekly: TimeframeRead,
                        daily: TimeframeRead) -> Confluence:
    reading = extract(scope, CONFLUENCE_SPEC)
    explanation = re.search(r"confluence-explanation[^>]*>([^<]+)", scope, re.IGNORECASE)
    if reading:
        return Confluence(reading=reading, explanation=explanation.group(1).strip() if explanation else "")

    monthly_mark = "✓" if monthly.signal in (Signal.GREEN, Signal.YELLOW) else "⚠️"
    weekly_mark = {Signal.GREEN: "✓", Signal.RED: "⚠️"}.get(weekly.signal, "~")
    daily_mark = {Signal.GREEN: "↑", Signal.RED: "↓"}.get(daily.signal, "→")
    return Confluence(
        reading=f"Monthly {monthly_mark} → Weekly {weekly_mark} → Daily {daily_mark}",
        explanation="Check timeframe alignment for entry quality.",
    )


# ── Narrative blocks ─────────────────────────────────────────


def _extract_lessons(scope: str) -> Lessons:
    return Lessons(
        what_worked=bullets_after(scope, "What Worked"),
        what_didnt=bullets_after(scope, "What Didn't") or bullets_after(scope, "What Didn’t"),
        lessons_forward=bullets_after(scope, "Lessons"),
    )


def _thesis_status(raw) -> ThesisStatus:
    lowered = str(raw or "").casefold()
    if "strengthening" in lowered:
        return ThesisStatus.STRENGTHENING
    if "weakening" in lowered:
        return ThesisStatus.WEAKENING
    if "review" in lowered:
        return ThesisStatus.UNDER_REVIEW
    return ThesisStatus.INTACT


def _extract_thesis(scope: str, fm: FrontMatter) -> ThesisCheck:
    status_match = _THESIS_STATUS.search(scope)
    status_raw = fm.get("thesis_status") or (status_match.group(0) if status_match else None)

    supporting = fm.get("supporting_points")
    concerning = fm.get("concerning_points")
    narrative = [
        p for p in paragraphs(re.sub(r"<[^>]+>", "", scope))
        if not _THESIS_STATUS.search(p) and not re.match(r"(supporting|concerning)\b", p, re.IGNORECASE)
    ]
    return ThesisCheck(
        status=_thesis_status(status_raw),
        supporting_points=[str(p) for p in supporting] if isinstance(supporting, list)
        else bullets_after(scope, "Supporting"),
        concerning_points=[str(p) for p in concerning] if isinstance(concerning, list)
        else bullets_after(scope, "Concerning"),
        narrative="\n\n".join(narrative),
    )


# ── Levels and scenarios ─────────────────────────────────────


def _key_level(price: float, name: str, emoji: str | None, description: str = "") -> KeyLevel:
    emoji = emoji or "📍"
    return KeyLevel(price=price, name=name, emoji=emoji,
                    category=LEVEL_CATEGORIES.get(emoji, "marker"), description=description)


def _extract_key_levels(scope: str, fm: FrontMatter) -> list[KeyLevel]:
    levels = fm.get("levels")
    if isinstance(levels, list):
        return [
            _key_level(to_price(level.get("price")), str(level.get("name", "")).strip(),
                       level.get("emoji"), str(level.get("description") or ""))
            for level in levels
            if isinstance(level, dict) and to_price(level.get("price")) is not None
        ]

    found = [
        _key_level(to_price(m.group("price")), strip_markup(m.group("name")), m.group("emoji"),
                   strip_markup(m.group("description") or ""))
        for m in _LEVEL_LINE.finditer(scope)
        if to_price(m.group("price")) is not None
    ]
    if found:
        return found

    for table in tables(scope):
        header = [canonicalize(strip_markup(cell)) for cell in table[0]]
        if "price" not in header or "level" not in header:
            continue
        price_col, name_col = header.index("price"), header.index("level")
        desc_col = next((header.index(h) for h in ("description", "why", "notes") if h in header), None)
        for cells in table[1:]:
            if max(price_col, name_col) >= len(cells):
                continue
            price = to_price(cells[price_col])
            if price is None:
                continue
            raw_name = cells[name_col].strip()
            emoji = next((e for e in LEVEL_CATEGORIES if raw_name.startswith(e)), None)
            name = strip_markup(raw_name[len(emoji):] if emoji else raw_name)
            description = strip_markup(cells[desc_col]) if desc_col is not None and desc_col < len(cells) else ""
            found.append(_key_level(price, name, emoji, description))
    return found


def _scenario_type(match: re.Match) -> ScenarioType | None:
    if match.group("emoji"):
        return SCENARIO_EMOJI[match.group("emoji")]
    if match.group("word"):
        return ScenarioType(match.group("word").lower())
    return None


def _scenario_from_block(kind: ScenarioType, block: str) -> Scenario | None:
    probability = _PERCENT.search(block)
    if not probability:
        return None
    if block.lstrip().startswith("|"):
        # | 🐂 Bull | 25% | Reclaim $460 | Add on strength |
        rows = table_rows(block)
        cells = rows[0] if rows else []
        index = next((i for i, cell in enumerate(cells) if _PERCENT.search(cell)), None)
        if index is None:
            return None
        probability = _PERCENT.search(cells[index])
        rest = [strip_markup(cell) for cell in cells[index + 1:]] + ["", ""]
        return Scenario(type=kind, probability=int(probability.group(1)), trigger=rest[0], response=rest[1])
    labelled = {m.group("label").lower(): strip_markup(m.group("value")) for m in _LABELLED.finditer(block)}
    trigger = labelled.get("trigger") or labelled.get("if") or ""
    response = labelled.get("response") or labelled.get("action") or labelled.get("plan") or ""
    if not trigger:
        # "🐂 25% — Reclaim $460, add on strength"
        tail = block[probability.end():].split("\n", 1)[0]
        tail = strip_markup(re.sub(r"^[\s)*|:—–-]+", "", tail))
        first, _, rest = tail.partition(",")
        trigger, response = first.strip(), response or rest.strip()
    return Scenario(type=kind, probability=int(probability.group(1)), trigger=trigger, response=response)


def _extract_scenarios(scope: str, fm: FrontMatter) -> list[Scenario]:
    configured = fm.get("scenarios")
    if isinstance(configured, dict):
        return [
            Scenario(type=ScenarioType(name), probability=to_int(item.get("probability")) or 0,
                     trigger=str(item.get("trigger") or ""), response=str(item.get("response") or ""))
            for name, item in configured.items()
            if name in _SCENARIO_NAMES and isinstance(item, dict)
        ]
    if isinstance(configured, list):
        return [
            Scenario(type=ScenarioType(str(item["type"]).lower()), probability=to_int(item.get("probability")) or 0,
                     trigger=str(item.get("trigger") or ""), response=str(item.get("response") or ""))
            for item in configured
            if isinstance(item, dict) and str(item.get("type", "")).lower() in _SCENARIO_NAMES
        ]

    blocks: list[tuple[ScenarioType, list[str]]] = []
    for line in scope.splitlines():
        start = _SCENARIO_START.match(line)
        kind = _scenario_type(start) if start else None
        if kind:
            blocks.append((kind, [line]))
        elif blocks and line.strip():
            blocks[-1][1].append(line)

    scenarios: list[Scenario] = []
    for kind, lines in blocks:
        if any(s.type == kind for s in scenarios):
            continue
        scenario = _scenario_from_block(kind, "\n".join(lines))
        if scenario:
            scenarios.append(scenario)
    return scenarios[:3]


# ── Calendar and gamma ───────────────────────────────────────


def _catalyst_date(when: str, year: int | None) -> date | None:
    parsed = to_date(when)
    if parsed or year is None:
        return parsed
    month_day = _MONTH_DAY.search(when)
    if not month_day:
        return None
    return to_date(f"{month_day.group(1)} {month_day.group(2)} {year}")


def _extract_catalysts(section: str, year: int | None) -> list[Catalyst]:
    catalysts = []
    for table in tables(section):
        header = [canonicalize(strip_markup(cell)) for cell in table[0]]
        when_col = next((header.index(h) for h in ("date", "when", "day") if h in header), None)
        event_col = next((header.index(h) for h in ("event", "catalyst", "what") if h in header), None)
        impact_col = next((header.index(h) for h in ("impact", "importance", "why it matters") if h in header), None)
        if when_col is None or event_col is None:
            continue
        for cells in table[1:]:
            if max(when_col, event_col) >= len(cells):
                continue
            when, event = strip_markup(cells[when_col]), strip_markup(cells[event_col])
            if not when or not event:
                continue
            impact = strip_markup(cells[impact_col]) if impact_col is not None and impact_col < len(cells) else ""
            catalysts.append(Catalyst(when=when, date=_catalyst_date(when, year), event=event, impact=impact or None))
    if catalysts:
        return catalysts

    for match in _CATALYST_LINE.finditer(section):
        when = strip_markup(match.group("when"))
        catalysts.append(Catalyst(
            when=when,
            date=_catalyst_date(when, year),
            event=strip_markup(match.group("event")),
            impact=strip_markup(match.group("impact")) if match.group("impact") else None,
        ))
    return catalysts


def _level_shift(section: str, label: str) -> LevelShift | None:
    match = re.search(
        rf"{label}{BOLD}\s*[:|]?\s*{BOLD}\s*\$?({NUMBER})\s*{BOLD}\s*(?:→|->|to)\s*{BOLD}\s*\$?({NUMBER})",
        section,
        re.IGNORECASE,
    )
    if not match:
        return None
    start, end = to_price(match.group(1)), to_price(match.group(2))
    return LevelShift(start=start, end=end) if start and end else None


def _extract_gamma_shifts(section: str) -> GammaShifts | None:
    if not section:
        return None
    shifts = {
        "call_wall": _level_shift(section, r"Call\s*Wall"),
        "gamma_strike": _level_shift(section, r"Gamma\s*Strike"),
        "hedge_wall": _level_shift(section, r"Hedge\s*Wall"),
        "put_wall": _level_shift(section, r"Put\s*Wall"),
    }
    if not any(shifts.values()):
        return None
    interpretation = _QUOTED.search(section)
    return GammaShifts(**shifts, interpretation=interpretation.group(1).strip() if interpretation else "")
