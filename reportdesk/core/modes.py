"""Trading mode table shared by the parsers and the accuracy engine.

Every place that needs a mode's emoji, daily cap or fallback value reads it
from here.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum

from reportdesk.config import get_settings

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    ORANGE = "orange"
    RED = "red"


@dataclass(frozen=True)
class ModeInfo:
    emoji: str
    daily_cap_pct: float
    guidance: str


MODE_INFO: dict[Mode, ModeInfo] = {
    Mode.GREEN: ModeInfo(
        emoji="🟢",
        daily_cap_pct=25,
        guidance="Favorable conditions for swing entries. Consider adding on dips to key levels.",
    ),
    Mode.YELLOW: ModeInfo(
        emoji="🟡",
        daily_cap_pct=15,
        guidance="Proceed with caution. Tighter stops, smaller positions. Wait for clearer signals.",
    ),
    Mode.ORANGE: ModeInfo(
        emoji="🟠",
        daily_cap_pct=10,
        guidance="Elevated caution. Respect key levels. Size positions conservatively.",
    ),
    Mode.RED: ModeInfo(
        emoji="🔴",
        daily_cap_pct=5,
        guidance="Defensive stance. Protect capital. Bounces are exits.",
    ),
}

# Mode → maximum daily range / sizing cap, in percent
MODE_DAILY_CAPS: dict[Mode, float] = {mode: info.daily_cap_pct for mode, info in MODE_INFO.items()}

EMOJI_TO_MODE: dict[str, Mode] = {info.emoji: mode for mode, info in MODE_INFO.items()}

# When a report carries no recognisable mode, downstream consumers still need
# one. Yellow is the "caution" middle regime.
FALLBACK_MODE = Mode.YELLOW

_MODE_WORD = re.compile(r"\b(green|yellow|orange|red)\b")


def default_mode() -> Mode:
    """Mode assigned to reports whose mode could not be extracted.

    Configurable through the ``DEFAULT_MODE`` setting; an unknown setting
    value falls back to yellow.
    """
    configured = get_settings().default_mode
    try:
        return Mode(configured.strip().lower())
    except ValueError:
        logger.warning(f"Unknown DEFAULT_MODE '{configured}', using {FALLBACK_MODE.value}")
        return FALLBACK_MODE


def coerce_mode(value: str | Mode | None) -> Mode | None:
    """Map free text such as ``"Yellow (Improving)"`` or ``"🔴"`` to a Mode."""
    if value is None:
        return None
    if isinstance(value, Mode):
        return value
    text = str(value).strip().lower()
    if not text:
        return None
    for emoji, mode in EMOJI_TO_MODE.items():
        if emoji in text:
            return mode
    match = _MODE_WORD.search(text)
    return Mode(match.group(1)) if match else None


def daily_cap_for(mode: Mode | str, override: float | None = None) -> float:
    """Daily cap for ``mode``; an explicit cap stated by the report wins."""
    if override is not None and override > 0:
        return float(override)
    resolved = coerce_mode(mode) or FALLBACK_MODE
    return MODE_DAILY_CAPS[resolved]
