"""Daily report parser.

Turns a daily report (markdown, optionally headed by YAML front matter or a
``REPORT_DATA`` JSON comment) into an ``ExtractedDailyReport``. Every field is
looked up in the front matter first and in the prose second. Fields the
downstream pipeline expects (mode, price, master eject, alerts, positioning)
each yield exactly one ``ParserWarning`` when they cannot be found; the parse
itself never fails.
"""

from __future__ import annotations

import logging
import re
from typing import NamedTuple

from reportdesk.core.modes import Mode, coerce_mode, default_mode
from reportdesk.parsers.fields import (
    BOLD,
    NUMBER,
    PRICE,
    SIGNAL_EMOJI,
    FieldSpec,
    bullet_items,
    extract,
    extract_match,
    pattern,
    strip_leading_emoji,
    strip_markup,
    table_rows,
    table_value,
    tables,
    to_date,
    to_float,
    to_int,
    to_percent,
    to_price,
    to_volume,
)
from reportdesk.parsers.frontmatter import FrontMatter, read_front_matter
from reportdesk.parsers.sections import canonicalize, split_sections
from reportdesk.schemas.report import (
    AlertDirection,
    EntryQuality,
    ExtractedDailyReport,
    GamePlanStep,
    LevelMapEntry,
    MasterEject,
    ModeCall,
    ParserWarning,
    PerformanceReview,
    Positioning,
    ReportAlert,
    ReportKind,
    ReportPrice,
    Severity,
    Signal,
    TierSignals,
)

logger = logging.getLogger(__name__)

DAILY_PARSER_VERSION = "3.2.0"

EJECT_ACTION_TABLE = "Daily close below = exit all positions"
EJECT_ACTION_DEFAULT = "Exit all positions immediately"

_MODE_WORD = r"(?P<mode>green|yellow|orange|red)"
_VARIANT = r"(?:\s*\((?P<variant>[^)\n]+)\))?"

MODE_SPEC = FieldSpec("mode", (
    # ## 🚦 Mode: 🟢 GREEN (Improving)
    pattern(rf"^#{{1,6}}\s*(?:🚦\s*)?(?:mode|regime status)\s*:?\s*[{SIGNAL_EMOJI}]?\s*{BOLD}{_MODE_WORD}{_VARIANT}",
            flags=re.IGNORECASE | re.MULTILINE),
    # | **Mode** | 🟡 **Yellow (Improving)** — early recovery |
    pattern(rf"\*\*Mode\*\*\s*\|\s*[{SIGNAL_EMOJI}]?\s*\*\*{_MODE_WORD}{_VARIANT}\*\*"
            rf"(?:\s*[—–-]\s*(?P<summary>[^|\n]+))?"),
    # 🔴 **RED
    pattern(rf"[{SIGNAL_EMOJI}]\s*{BOLD}{_MODE_WORD}\b{_VARIANT}"),
    # "yellow mode"
    pattern(rf"\b{_MODE_WORD}\s+mode\b"),
    # **Orange**
    pattern(rf"\*\*\s*{_MODE_WORD}\s*\*\*"),
))

TABLE_CLOSE_SPEC = FieldSpec("close", (
    pattern(rf"\|\s*{BOLD}Current\s*Price{BOLD}\s*\|\s*{BOLD}{PRICE}", to_price),
    pattern(rf"\*\*Price\*\*\s*\|\s*{PRICE}", to_price),
))

PROSE_CLOSE_SPEC = FieldSpec("close", (
    pattern(rf"\b(?:close|closed at|last|price)\b{BOLD}\s*[:|]?\s*{BOLD}\s*{PRICE}", to_price),
))

CHANGE_PCT_SPEC = FieldSpec("change_pct", (
    pattern(r"\*\*Price\*\*\s*\|[^|\n]*?([+\-−]?\d+(?:\.\d+)?)\s*%", to_percent),
    pattern(r"\bchange\b[^|\n:]*[:|]\s*\**\s*([+\-−]?\d+(?:\.\d+)?)\s*%", to_percent),
    pattern(r"([+\-−]\d+(?:\.\d+)?)\s*%", to_percent),
))

VOLUME_SPEC = FieldSpec("volume", (
    pattern(rf"\bvolume\b{BOLD}\s*[:|]?\s*{BOLD}\s*({NUMBER}\s*[KMB]?)\b", to_volume),
))

RANGE_SPEC = FieldSpec("range", (
    pattern(rf"\b(?:day'?s?\s*)?range\b{BOLD}\s*[:|]?\s*{BOLD}\s*\$?(?P<low>{NUMBER})\s*[-–—]\s*\$?(?P<high>{NUMBER})"),
))

MASTER_EJECT_SPEC = FieldSpec("master_eject", (
    pattern(rf"\*\*Master\s*Eject:?\*\*:?\s*{PRICE}(?:\s*[—–-]+\s*(?P<action>[^\n|]+))?"),
    pattern(rf"(?:NEW\s+)?Master\s*Eject(?:\s*Level)?{BOLD}\s*[:—–-]?\s*{BOLD}\s*{PRICE}"
            rf"(?:{BOLD}\s*[—–-]+\s*(?P<action>[^\n|]+))?"),
    pattern(rf"\bEject\s*\|\s*{PRICE}"),
))

ENTRY_QUALITY_SPEC = FieldSpec("entry_quality", (
    pattern(r"Entry\s*Quality\**\s*[:|]?\s*\**\s*[❌✅⚠️\s]*(\d)\s*/\s*5", to_int),
    pattern(r"(?:score|quality|rating)\**\s*[:|]\s*\**\s*(\d)\s*/\s*5", to_int),
))

PERFORMANCE_SPEC = FieldSpec("performance", (
    pattern(r"Scorecard\**\s*[:|]?\s*\**\s*(?P<score>\d+)\s*/\s*(?P<total>\d+)"),
    pattern(r"(?P<score>\d+)\s*(?:/|of)\s*(?P<total>\d+)\s*✅"),
))

REPORT_DATE_SPEC = FieldSpec("report_date", (
    pattern(r"(\d{4}-\d{2}-\d{2})", to_date),
    pattern(r"((?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\.?\s+\d{1,2}(?:st|nd|rd|th)?,?\s+\d{4})",
            to_date),
    pattern(r"(\d{1,2}/\d{1,2}/\d{4})", to_date),
))

_GAME_PLAN_STEP = re.compile(
    r"^\s*(?:[-*•]|\d+[.)])?\s*\**IF\**[:\s]+(?P<condition>.+?)\s*\**(?:THEN|→|->)\**[:\s]*(?P<action>.+?)\s*$",
    re.IGNORECASE | re.MULTILINE,
)
_ALERT_LINE = re.compile(
    rf"^\s*(?:[-*•]\s*)?\**(?P<name>[^:\n|*]+?)\**\s*:\s*\**\$?(?P<price>{NUMBER})\**\s*[-–—]\s*(?P<action>[^\n]+?)\s*$",
    re.MULTILINE,
)
_HEADING_SUMMARY = re.compile(r"[^\n]*\n\s*\*\*([^*\n]+)\*\*")
_CAP_PCT = re.compile(r"(\d+(?:\.\d+)?)(?:\s*[-–]\s*(\d+(?:\.\d+)?))?\s*%")
_PROSE_CAP = re.compile(r"daily\s*cap\**\s*[:|]?\s*\**\s*(\d+(?:\.\d+)?)(?:\s*[-–]\s*(\d+(?:\.\d+)?))?\s*%", re.IGNORECASE)
_STANCE = re.compile(r"\bstance\**\s*:\s*\**\s*([^\n.]+)", re.IGNORECASE)

_DOWNSIDE_NAME = re.compile(r"support|eject|stop|downside|floor|bounce", re.IGNORECASE)
_DOWNSIDE_ACTION = re.compile(r"protect|exit|cut", re.IGNORECASE)
_UPSIDE_ACTION = re.compile(r"trim|breakout", re.IGNORECASE)
_DIP_ACTION = re.compile(r"nibble|pause|buy", re.IGNORECASE)

_NAME_HEADERS = ("level", "what it means", "name", "level name", "description")
_MARKER_HEADERS = ("", "alert", "signal", "type", "direction")
_REASON_HEADERS = ("why", "reason", "notes")
_EMPTY_CELLS = {"", "—", "–", "-", "n/a"}


class DailyParseResult(NamedTuple):
    record: ExtractedDailyReport
    warnings: list[ParserWarning]

    @property
    def parser_version(self) -> str:
        return DAILY_PARSER_VERSION


def parse_daily(text: str) -> DailyParseResult:
    """Parse a daily report into its structured record plus warnings."""
    warnings: list[ParserWarning] = []

    def warn(field: str, message: str, severity: Severity = Severity.SOFT) -> None:
        warnings.append(ParserWarning(field=field, message=message, severity=severity))

    fm = read_front_matter(text or "")
    if fm.error:
        warn("frontmatter", fm.error)
    body = fm.body
    sections = split_sections(body, ReportKind.DAILY)

    mode = _extract_mode(body, fm)
    if mode is None:
        fallback = default_mode()
        warn("mode", f"No mode token found; defaulting to {fallback.value}")
        mode = ModeCall(current=fallback, label=f"{fallback.value.upper()} MODE",
                        summary="Mode could not be determined")

    price = _extract_price(body, sections.get("executive summary", ""), fm)
    if price.close is None:
        warn("price", "Could not extract close price")

    master_eject = _extract_master_eject(body, fm)
    if master_eject is None:
        warn("master_eject", "Could not extract Master Eject price", Severity.HARD)

    alerts = _extract_alerts(sections.get("alerts", ""), fm, price.close)
    if not alerts:
        warn("alerts", "No alert levels found")

    positioning = _extract_positioning(body, sections.get("positioning", ""), fm)
    if positioning is None:
        warn("positioning", "Could not extract positioning guidance")

    record = ExtractedDailyReport(
        report_date=_extract_report_date(body, fm),
        mode=mode,
        price=price,
        master_eject=master_eject,
        alerts=alerts,
        levels_map=_extract_levels_map(body, sections.get("levels map", ""), fm),
        positioning=positioning,
        tiers=_extract_tiers(body, fm),
        entry_quality=_extract_entry_quality(body, sections.get("entry quality", "")),
        performance=_extract_performance(sections.get("previous day", "")),
        game_plan=_extract_game_plan(sections.get("game plan", "")),
    )

    if warnings:
        logger.debug(f"Daily parse produced {len(warnings)} warning(s): "
                     f"{', '.join(w.field for w in warnings)}")
    return DailyParseResult(record=record, warnings=warnings)


# ── Mode ─────────────────────────────────────────────────────


def _mode_call(mode: Mode, variant: str | None, summary: str = "") -> ModeCall:
    variant = (variant or "").strip()
    label = f"{mode.value.upper()} ({variant}) MODE" if variant else f"{mode.value.upper()} MODE"
    return ModeCall(current=mode, label=label, summary=strip_markup(summary))


def _extract_mode(body: str, fm: FrontMatter) -> ModeCall | None:
    fm_mode = fm.get("mode")
    if fm_mode is not None:
        mode = coerce_mode(str(fm_mode))
        if mode:
            variant = re.search(r"\(([^)]+)\)", str(fm_mode))
            return _mode_call(mode, variant.group(1) if variant else None)

    match = extract_match(body, MODE_SPEC)
    if not match:
        return None
    groups = match.groupdict()
    summary = groups.get("summary") or ""
    if not summary and match.group(0).lstrip().startswith("#"):
        # the bold line right under a "## Mode:" heading explains the call
        following = _HEADING_SUMMARY.match(body, match.end())
        if following:
            summary = following.group(1)
    return _mode_call(Mode(groups["mode"].lower()), groups.get("variant"), summary)


# ── Price ────────────────────────────────────────────────────


def _extract_price(body: str, summary: str, fm: FrontMatter) -> ReportPrice:
    scope = summary or body
    close = to_price(fm.get("price_close", "close"))
    if close is None:
        close = extract(body, TABLE_CLOSE_SPEC) or extract(scope, PROSE_CLOSE_SPEC)
    if close is None and scope is not body:
        close = extract(body, PROSE_CLOSE_SPEC)

    change_pct = to_percent(fm.get("price_change_pct", "change_pct"))
    if change_pct is None:
        change_pct = extract(scope, CHANGE_PCT_SPEC)
    if change_pct is None and scope is not body:
        change_pct = extract(body, CHANGE_PCT_SPEC)

    def stat(label: str) -> float | None:
        value = to_price(fm.get(f"price_{label}", label))
        if value is None:
            value = extract(summary, FieldSpec(label, (
                pattern(rf"(?<!\w){label}\b{BOLD}\s*[:|]\s*{BOLD}\s*{PRICE}", to_price),
            )))
        return value

    high, low = stat("high"), stat("low")
    if high is None or low is None:
        day_range = extract_match(summary, RANGE_SPEC)
        if day_range:
            low = low or to_price(day_range.group("low"))
            high = high or to_price(day_range.group("high"))

    volume = to_volume(fm.get("volume")) or extract(summary, VOLUME_SPEC)
    return ReportPrice(close=close, change_pct=change_pct, open=stat("open"),
                       high=high, low=low, volume=volume)


# ── Master eject ─────────────────────────────────────────────


def _extract_master_eject(body: str, fm: FrontMatter) -> MasterEject | None:
    price = to_price(fm.get("master_eject"))
    if price is not None:
        return MasterEject(price=price, action=EJECT_ACTION_TABLE)

    for cells in table_rows(body):
        names = [i for i, cell in enumerate(cells) if "master eject" in strip_markup(cell).casefold()]
        if not names:
            continue
        others = [(i, cell) for i, cell in enumerate(cells) if i != names[0]]
        price_index = next((i for i, cell in others if to_price(cell) is not None), None)
        if price_index is None:
            continue
        action = next(
            (strip_markup(cell) for i, cell in reversed(others)
             if i > price_index and strip_markup(cell).casefold() not in _EMPTY_CELLS),
            EJECT_ACTION_TABLE,
        )
        return MasterEject(price=to_price(cells[price_index]), action=action)

    match = extract_match(body, MASTER_EJECT_SPEC)
    if match and to_price(match.group(1)) is not None:
        action = strip_markup(match.groupdict().get("action") or "") or EJECT_ACTION_DEFAULT
        return MasterEject(price=to_price(match.group(1)), action=action)
    return None


# ── Alerts ───────────────────────────────────────────────────


def _sort_alerts(alerts: list[ReportAlert]) -> list[ReportAlert]:
    """Upside first, then downside; each by price descending."""
    return sorted(alerts, key=lambda a: (a.direction != AlertDirection.UPSIDE, -a.price))


def _direction_from_marker(marker: str) -> AlertDirection | None:
    if "🔴" in marker:
        return AlertDirection.DOWNSIDE
    if "🟢" in marker or "🟡" in marker:
        return AlertDirection.UPSIDE
    return None


def _direction_from_words(name: str, action: str) -> AlertDirection:
    if _DOWNSIDE_NAME.search(name) or _DOWNSIDE_ACTION.search(action):
        return AlertDirection.DOWNSIDE
    return AlertDirection.UPSIDE


def _column(header: list[str], names: tuple[str, ...]) -> int | None:
    return next((i for i, cell in enumerate(header) if cell in names), None)


def _alerts_from_tables(section: str) -> list[ReportAlert]:
    alerts: list[ReportAlert] = []
    for table in tables(section):
        header = [canonicalize(strip_markup(cell)) for cell in table[0]]
        price_col = _column(header, ("price",))
        if price_col is None:
            continue
        name_col = _column(header, _NAME_HEADERS)
        action_col = _column(header, ("action",))
        reason_col = _column(header, _REASON_HEADERS)
        marker_col = 0 if header[0] in _MARKER_HEADERS and price_col != 0 else None
        if name_col is None:
            continue

        for cells in table[1:]:
            cells = cells + [""] * (len(header) - len(cells))
            price = to_price(cells[price_col])
            name = strip_markup(cells[name_col])
            if price is None or not name or name.casefold() in ("level", "price"):
                continue
            if "master eject" in name.casefold():
                continue
            action = strip_markup(cells[action_col]) if action_col is not None else ""
            marker = cells[marker_col] if marker_col is not None else ""
            direction = _direction_from_marker(marker) or _direction_from_words(name, action)
            reason = strip_markup(cells[reason_col]) if reason_col is not None else ""
            if not reason and "🟡" in marker:
                reason = "Caution level"
            alerts.append(ReportAlert(
                direction=direction,
                level_name=name,
                price=price,
                action=action,
                reason=reason if reason.casefold() not in _EMPTY_CELLS else None,
            ))
    return alerts


def _alerts_from_lines(section: str) -> list[ReportAlert]:
    alerts = []
    for match in _ALERT_LINE.finditer(section):
        name = strip_markup(match.group("name"))
        price = to_price(match.group("price"))
        if price is None or "master eject" in name.casefold():
            continue
        alerts.append(ReportAlert(
            direction=AlertDirection.DOWNSIDE if _DOWNSIDE_NAME.search(name) else AlertDirection.UPSIDE,
            level_name=name,
            price=price,
            action=strip_markup(match.group("action")),
        ))
    return alerts


def _alerts_from_levels(levels: list, close: float | None) -> list[ReportAlert]:
    """Front-matter ``levels`` entries: trim actions sit above price, nibbles below."""
    alerts = []
    for level in levels:
        if not isinstance(level, dict):
            continue
        name = str(level.get("name") or "").strip()
        price = to_price(level.get("price"))
        action = str(level.get("action") or "").strip()
        if not name or price is None or not action:
            continue
        lowered = name.casefold()
        if "current price" in lowered or "master eject" in lowered or "exit all" in action.casefold():
            continue
        if _UPSIDE_ACTION.search(action):
            direction = AlertDirection.UPSIDE
        elif _DIP_ACTION.search(action):
            direction = AlertDirection.DOWNSIDE
        elif close is not None:
            direction = AlertDirection.UPSIDE if price > close else AlertDirection.DOWNSIDE
        else:
            direction = _direction_from_words(name, action)
        alerts.append(ReportAlert(direction=direction, level_name=name, price=price, action=action))
    return alerts


def _extract_alerts(section: str, fm: FrontMatter, close: float | None) -> list[ReportAlert]:
    alerts = _alerts_from_tables(section) or _alerts_from_lines(section)
    if not alerts:
        levels = fm.get("levels")
        if isinstance(levels, list):
            alerts = _alerts_from_levels(levels, close)
    return _sort_alerts(alerts)


# ── Levels map ───────────────────────────────────────────────


def _cell(cells: list[str], index: int | None) -> str:
    if index is None or index >= len(cells):
        return ""
    value = strip_markup(cells[index])
    return "" if value.casefold() in _EMPTY_CELLS else value


def _extract_levels_map(body: str, section: str, fm: FrontMatter) -> list[LevelMapEntry]:
    levels = fm.get("levels")
    if isinstance(levels, list):
        entries = [
            LevelMapEntry(name=str(level["name"]).strip(), price=to_price(level.get("price")),
                          action=str(level.get("action") or ""), source="Report")
            for level in levels
            if isinstance(level, dict) and level.get("name") and to_price(level.get("price")) is not None
        ]
        if entries:
            return entries

    for table in tables(section) + tables(body):
        header = [canonicalize(strip_markup(cell)) for cell in table[0]]
        level_col, price_col = _column(header, ("level",)), _column(header, ("price",))
        if level_col is None or price_col is None or "source" not in header:
            continue
        source_col, depth_col = _column(header, ("source",)), _column(header, ("depth",))
        action_col = _column(header, ("action",))
        entries = []
        for cells in table[1:]:
            name = _cell(cells, level_col)
            price = to_price(cells[price_col]) if price_col < len(cells) else None
            if not name or price is None:
                continue
            entries.append(LevelMapEntry(name=name, price=price, action=_cell(cells, action_col),
                                         source=_cell(cells, source_col), depth=_cell(cells, depth_col)))
        if entries:
            return entries
    return []


# ── Positioning ──────────────────────────────────────────────


def _cap_from_text(text: str | None) -> float | None:
    """``"15-25% of target position"`` → 20.0 (range midpoint)."""
    if not text:
        return None
    match = _CAP_PCT.search(text)
    if not match:
        return None
    low = float(match.group(1))
    high = float(match.group(2)) if match.group(2) else low
    return round((low + high) / 2, 2)


def _clean_posture(raw: str) -> str:
    posture = strip_leading_emoji(strip_markup(raw))
    return re.split(r"\s+[—–]\s+|\s*—\s*", posture, maxsplit=1)[0].strip()


def _extract_positioning(body: str, section: str, fm: FrontMatter) -> Positioning | None:
    fm_cap = to_float(fm.get("daily_cap_pct"))
    if fm_cap is None:
        low, high = to_float(fm.get("daily_cap_min")), to_float(fm.get("daily_cap_max"))
        if low is not None:
            fm_cap = round((low + (high if high is not None else low)) / 2, 2)
    fm_posture = str(fm.get("positioning", "posture") or "").strip()
    fm_vehicle = str(fm.get("vehicle") or "").strip()
    if fm_cap is not None or fm_posture or fm_vehicle:
        return Positioning(
            posture=fm_posture,
            daily_cap=f"{fm_cap:g}% of target position" if fm_cap is not None else "",
            daily_cap_pct=fm_cap,
            vehicle=fm_vehicle,
        )

    scope = section or body
    daily_cap = table_value(scope, "Daily Cap") or table_value(body, "Daily Cap")
    vehicle = table_value(scope, "Vehicle") or table_value(body, "Vehicle")
    posture = (table_value(scope, "Posture") or table_value(scope, "Positioning")
               or table_value(body, "Posture") or table_value(body, "Positioning"))

    cap_pct = _cap_from_text(daily_cap)
    if cap_pct is None and section:
        prose = _PROSE_CAP.search(section)
        if prose:
            cap_pct = _cap_from_text(prose.group(0))
            daily_cap = daily_cap or strip_markup(prose.group(0))
    if not posture and section:
        stance = _STANCE.search(section)
        posture = stance.group(1) if stance else ""

    posture = _clean_posture(posture) if posture else ""
    if not (daily_cap or vehicle or posture):
        return None
    return Positioning(
        posture=posture,
        daily_cap=strip_markup(daily_cap or ""),
        daily_cap_pct=cap_pct,
        vehicle=strip_markup(vehicle or ""),
    )


# ── Optional extras ──────────────────────────────────────────


def _signal(value) -> Signal:
    mode = coerce_mode(str(value)) if value is not None else None
    return Signal(mode.value) if mode else Signal.YELLOW


def _extract_tiers(body: str, fm: FrontMatter) -> TierSignals | None:
    tier_values = [
        fm.get(f"tier{n}_{name}", f"tier_{n}_{name}")
        for n, name in ((1, "regime"), (2, "trend"), (3, "timing"), (4, "flow"))
    ]
    if any(value is not None for value in tier_values):
        regime, trend, timing, flow = (_signal(value) for value in tier_values)
        return TierSignals(regime=regime, trend=trend, timing=timing, flow=flow)

    for table in tables(body):
        header = [canonicalize(strip_markup(cell)) for cell in table[0]]
        if len(header) < 4 or not all(header[i].startswith(f"tier {i + 1}") for i in range(4)):
            continue
        for cells in table[1:]:
            if len(cells) >= 4 and all(any(e in cell for e in "🟢🟡🟠🔴") for cell in cells[:4]):
                regime, trend, timing, flow = (_signal(cell) for cell in cells[:4])
                return TierSignals(regime=regime, trend=trend, timing=timing, flow=flow)
    return None


def _extract_entry_quality(body: str, section: str) -> EntryQuality | None:
    score = extract(body, ENTRY_QUALITY_SPEC)
    if score is None and section:
        score = extract(section, FieldSpec("entry_quality", (pattern(r"(\d)\s*/\s*5", to_int),)))
    if score is None or not 0 <= score <= 5:
        return None
    return EntryQuality(score=score, factors=bullet_items(section))


def _extract_performance(section: str) -> PerformanceReview | None:
    match = extract_match(section, PERFORMANCE_SPEC)
    if not match:
        return None
    return PerformanceReview(score=int(match.group("score")), total=int(match.group("total")))


def _extract_game_plan(section: str) -> list[GamePlanStep]:
    steps = []
    for match in _GAME_PLAN_STEP.finditer(section or ""):
        condition = strip_markup(match.group("condition"))
        if condition and not any(step.condition == condition for step in steps):
            steps.append(GamePlanStep(condition=condition, action=strip_markup(match.group("action"))))
    return steps


def _extract_report_date(body: str, fm: FrontMatter):
    fm_date = to_date(fm.get("date"))
    if fm_date:
        return fm_date
    head = "\n".join(body.strip().splitlines()[:10])
    return extract(head, REPORT_DATE_SPEC)
