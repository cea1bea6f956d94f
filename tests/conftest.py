import pytest
import pandas as pd


DAILY_REPORT = """# TSLA Daily Report — January 27, 2026

## 🚦 Mode: 🟡 YELLOW (Improving)

**Structure is repairing but the daily trend has not confirmed.**

## 📊 Executive Summary

| Metric | Value |
|--------|-------|
| **Price** | $419.25 (-$18.25, -4.17%) |
| **Open** | $431.10 |
| **High** | $433.50 |
| **Low** | $415.80 |
| **Volume** | 98.5M |

## 🎯 Alerts to Set

| | Price | Level | Action | Why |
|---|-------|-------|--------|-----|
| 🟢 | $445 | Call Wall | Trim 25% | Dealer resistance |
| 🟡 | $432 | Gamma Strike | Watch for rejection | |
| 🔴 | $410 | Put Wall | Nibble 10% | Dealer support |
| 🔴 | $400 | Master Eject | Exit all | |

## 🗺️ Key Levels

| Level | Price | Source | Depth | Action |
|-------|-------|--------|-------|--------|
| Call Wall | $445 | SpotGamma | Deep | Trim |
| Put Wall | $410 | SpotGamma | Medium | Nibble |
| Master Eject | $400 | Structure | — | Daily close below = exit all positions |

## 📐 Position Sizing

| | |
|---|---|
| **Daily Cap** | 10-20% of target position |
| **Vehicle** | Shares only |
| **Posture** | 🟡 Cautious — wait for reclaim of $432 |

## 📋 Game Plan

- **IF** price reclaims $432 **THEN** add 10%
- **IF** price loses $410 **THEN** stop nibbling
"""

MINIMAL_DAILY_REPORT = """# Daily Report

Close: $250.00

**Master Eject:** $240
"""

FRONT_MATTER_DAILY_REPORT = """---
date: 2026-01-28
mode: Orange (Deteriorating)
price_close: 402.5
master_eject: 390
daily_cap_pct: 10
vehicle: Shares
positioning: Defensive
levels:
  - name: Call Wall
    price: 420
    action: Trim 20%
  - name: Put Wall
    price: 395
    action: Nibble 5%
---
# TSLA Daily Report
"""

WEEKLY_REVIEW = """# TSLA Weekly Review

**Week of January 26 – 30, 2026**

🟠 **ORANGE MODE**
Structure stressed, controlled entries only — 10% daily cap

## 📊 Weekly Candle

| Stat | Value |
|------|-------|
| **Open** | $448.20 |
| **High** | $452.00 |
| **Low** | $401.50 |
| **Close** | $419.25 |
| **Change** | -$28.95 (-6.46%) |

## 🔭 Multi-Timeframe

### 📅 Monthly — 🟢 GREEN

| Indicator | Reading |
|-----------|---------|
| BX-Trender | Green HH |
| Structure | Higher highs intact |
| 9 EMA | Above ✅ |
| 21 EMA | Above ✅ |

"Long-term uptrend untouched."

### 📆 Weekly — 🟡 YELLOW

| Indicator | Reading |
|-----------|---------|
| BX-Trender | Red LH |
| Structure | Testing the range low |
| 9 EMA | Below ⚠️ |
| 13 EMA | Below ⚠️ |
| 21 EMA | Above ✅ |

"Momentum fading, structure still holding."

### 📈 Daily — 🔴 RED

| Indicator | Reading |
|-----------|---------|
| BX-Trender | Red LL |
| Structure | Lower lows |
| 9 EMA | Below ⚠️ |
| 21 EMA | Below ⚠️ |

"Short-term trend is down."

**Confluence:** Monthly ✓ → Weekly ~ → Daily ↓

## 📖 What Happened

Earnings week delivered a sharp rejection at $452 and a flush into the low $400s.

Buyers stepped in at the put wall on Thursday.

## 💡 What We Learned

**What Worked**
- Trimming at the call wall
- Respecting the orange mode cap

**What Didn't**
- Early nibbles above $430

**Lessons**
- Wait for the daily close before adding

## 🧭 Thesis Check

**THESIS INTACT**

Supporting:
- Robotaxi expansion on schedule
- Energy storage margins rising

Concerning:
- Auto margins compressing

The long-term story is unchanged; the tape is just digesting.

## 👀 Looking Ahead

Fed decision Wednesday sets the tone for the week.

## 🎯 Key Levels

- $460 ⚡ Breakout Trigger — weekly close above flips mode
- $432 ⏸️ Pause Zone — prior support turned resistance
- $400 ❌ Master Eject — weekly close below exits

## 🎲 Scenarios

- 🐂 **Bull 25%** — Reclaim $432, add back trimmed shares
- ⚖️ **Base 50%** — Range $405-$432, nibble at support only
- 🐻 **Bear 25%** — Lose $400, exit all

## 📅 Catalysts

| Date | Event | Impact |
|------|-------|--------|
| Wed Jan 28 | FOMC decision | High |
| Thu Jan 29 | Q4 deliveries call | Medium |

## 🌀 Gamma Context

Call Wall: $450 → $440
Put Wall: $400 → $410

"Dealers are pulling the ceiling lower."

## 💬 Take

Patience pays in orange mode.
"""


@pytest.fixture
def daily_report_text():
    return DAILY_REPORT


@pytest.fixture
def minimal_daily_text():
    """Close and master eject only: no mode, alerts or positioning."""
    return MINIMAL_DAILY_REPORT


@pytest.fixture
def front_matter_daily_text():
    return FRONT_MATTER_DAILY_REPORT


@pytest.fixture
def weekly_review_text():
    return WEEKLY_REVIEW


@pytest.fixture
def parsed_daily(daily_report_text):
    from reportdesk.parsers import parse_daily
    return parse_daily(daily_report_text).record


@pytest.fixture
def yahoo_bars():
    """yfinance-shaped daily download for the week of Jan 26, 2026."""
    dates = pd.date_range(start="2026-01-26", periods=5, freq="B")
    return pd.DataFrame({
        "Open": [420.0, 419.0, 412.0, 405.0, 410.0],
        "High": [436.0, 425.0, 418.0, 414.0, 421.0],
        "Low": [412.0, 408.0, 401.5, 402.0, 406.0],
        "Close": [419.0, 413.0, 405.0, 410.0, 419.25],
        "Adj Close": [419.0, 413.0, 405.0, 410.0, 419.25],
        "Volume": [98_500_000, 87_000_000, 120_000_000, 95_000_000, 80_000_000],
    }, index=dates)
