"""Publication-date and duration parsing."""

from __future__ import annotations

import re
from datetime import datetime, timezone

_ZONE_ABBR = re.compile(r"\b[A-Z]{3,5}\b")
_LONG_FRACTION = re.compile(r"(\.\d{6})\d+")

# (strptime format, has zone abbreviation)
_COMMON = [
    ("%a, %d %b %Y %H:%M:%S %Z", True),
    ("%a, %d %b %Y %H:%M:%S %z", False),
    ("%Y-%m-%dT%H:%M:%S%z", False),
    ("%Y-%m-%dT%H:%M:%S.%f%z", False),
]

_ALL = [
    ("%m/%d %I:%M:%S%p '%y %z", False),
    ("%a %b %d %H:%M:%S %Y", False),
    ("%a %b %d %H:%M:%S %Z %Y", True),
    ("%a %b %d %H:%M:%S %z %Y", False),
    ("%d %b %y %H:%M %Z", True),
    ("%d %b %y %H:%M %z", False),
    ("%A, %d-%b-%y %H:%M:%S %Z", True),
    *_COMMON,
    ("%I:%M%p", False),
    ("%b %d %H:%M:%S", False),
    ("%b %d %H:%M:%S.%f", False),
    ("%Y-%m-%d %H:%M:%S", False),
    ("%Y-%m-%d", False),
    ("%H:%M:%S", False),
]


def _try(fmt: str, has_zone: bool, text: str) -> datetime | None:
    if has_zone:
        matches = _ZONE_ABBR.findall(text)
        if len(matches) != 1:
            return None
        text = _ZONE_ABBR.sub("+0000", text)
        fmt = fmt.replace("%Z", "%z")
    try:
        value = datetime.strptime(text, fmt)
    except ValueError:
        return None
    if "%Y" not in fmt and "%y" not in fmt:
        value = value.replace(year=1)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def parse_time(text: str) -> datetime:
    """Parse a feed date, trying common RSS formats before the rest."""
    cleaned = _LONG_FRACTION.sub(r"\1", text.strip())
    for fmt, has_zone in (*_COMMON, *_ALL):
        value = _try(fmt, has_zone, cleaned)
        if value is not None:
            return value
    raise ValueError("couldn't parse time of publication")


_UNITS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60_000_000_000,
    "h": 3_600_000_000_000,
}
_PART = re.compile(r"(\d*)(?:\.(\d*))?(ns|us|µs|μs|ms|s|m|h)")


def parse_duration(text: str) -> float:
    """Parse a duration such as '1m30s' or '1.5h' and return seconds."""
    s = text
    sign = 1
    if s[:1] in "+-" and s:
        sign = -1 if s[0] == "-" else 1
        s = s[1:]
    if s == "0":
        return 0.0
    if not s:
        raise ValueError(f"invalid duration {text!r}")
    total = 0
    pos = 0
    while pos < len(s):
        m = _PART.match(s, pos)
        if m is None or (not m.group(1) and not m.group(2)):
            raise ValueError(f"invalid duration {text!r}")
        whole, frac, unit = m.group(1) or "0", m.group(2) or "", m.group(3)
        scale = _UNITS[unit]
        total += int(whole) * scale
        if frac:
            total += int(frac) * scale // 10 ** len(frac)
        pos = m.end()
    return sign * total / 1e9


def _fmt(value: int, precision: int) -> str:
    whole, frac = divmod(value, 10**precision)
    out = str(whole)
    if frac:
        out += "." + str(frac).zfill(precision).rstrip("0")
    return out


def format_duration(seconds: float) -> str:
    """Render seconds the way durations are conventionally printed, e.g. '1m0s'."""
    ns = round(seconds * 1e9)
    if ns == 0:
        return "0s"
    sign = "-" if ns < 0 else ""
    u = abs(ns)
    if u < 1_000:
        return f"{sign}{u}ns"
    if u < 1_000_000:
        return f"{sign}{_fmt(u, 3)}µs"
    if u < 1_000_000_000:
        return f"{sign}{_fmt(u, 6)}ms"
    hours, rest = divmod(u, 3_600_000_000_000)
    minutes, rest = divmod(rest, 60_000_000_000)
    out = _fmt(rest, 9) + "s"
    if hours or minutes:
        out = f"{minutes}m" + out
    if hours:
        out = f"{hours}h" + out
    return sign + out