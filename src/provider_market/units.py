"""Byte-size and duration parsing/formatting for the ask commands.

Sizes follow the docker go-units ``RAMInBytes`` grammar (binary multipliers,
``32GiB`` == ``32G`` == ``32gb``). Durations follow the Go ``time.ParseDuration``
grammar (``720h0m0s``, ``1.5h``, ``90s``).
"""

from __future__ import annotations

import re
from decimal import Decimal, ROUND_DOWN

from provider_market.errors import MalformedDuration, MalformedSize

KIB = 1024

_SIZE_RE = re.compile(r"^([0-9]+(?:\.[0-9]+)*) ?([kmgtp])?i?b?$", re.IGNORECASE)
_SIZE_MULTIPLIERS = {
    "": 1,
    "k": KIB,
    "m": KIB**2,
    "g": KIB**3,
    "t": KIB**4,
    "p": KIB**5,
}
BYTE_SIZE_UNITS = ["B", "KiB", "MiB", "GiB", "TiB", "PiB", "EiB", "ZiB"]

# Seconds per unit.
_DURATION_UNITS = {
    "ns": Decimal("1e-9"),
    "us": Decimal("1e-6"),
    "µs": Decimal("1e-6"),
    "μs": Decimal("1e-6"),
    "ms": Decimal("1e-3"),
    "s": Decimal(1),
    "m": Decimal(60),
    "h": Decimal(3600),
}
# Two-letter suffixes come first so "ms" wins over "m".
_DURATION_RE = re.compile(r"([0-9]+(?:\.[0-9]*)?|\.[0-9]+)(ns|us|µs|μs|ms|s|m|h)")


def parse_size(text: str) -> int:
    """Parse a human byte size (``256B``, ``32GiB``, ``512``) into bytes."""
    m = _SIZE_RE.match(text.strip())
    if m is None:
        raise MalformedSize(text, "expected <number>[KiB|MiB|GiB|TiB|PiB]")
    magnitude, unit = m.groups()
    try:
        value = Decimal(magnitude)
    except ArithmeticError as exc:
        raise MalformedSize(text, str(exc)) from exc
    multiplier = _SIZE_MULTIPLIERS[(unit or "").lower()]
    return int((value * multiplier).to_integral_value(rounding=ROUND_DOWN))


def size_str(size: int) -> str:
    """Render a byte count like ``256 B`` or ``32 GiB``."""
    f = float(size)
    i = 0
    while f >= KIB and i + 1 < len(BYTE_SIZE_UNITS):
        f /= KIB
        i += 1
    return f"{f:.4g} {BYTE_SIZE_UNITS[i]}"


def parse_duration(text: str) -> Decimal:
    """Parse a Go-style duration string into seconds."""
    s = text.strip()
    if s == "0":
        return Decimal(0)
    if not s:
        raise MalformedDuration(text, "empty duration")

    total = Decimal(0)
    pos = 0
    while pos < len(s):
        m = _DURATION_RE.match(s, pos)
        if m is None:
            raise MalformedDuration(text, "expected components like 720h0m0s")
        magnitude, unit = m.groups()
        total += Decimal(magnitude) * _DURATION_UNITS[unit]
        pos = m.end()
    return total


def duration_to_epochs(text: str, block_delay: int) -> int:
    """Convert a duration string to whole chain epochs, truncating."""
    seconds = parse_duration(text)
    return int(seconds // block_delay)


def format_duration(seconds: int) -> str:
    """Render whole seconds the way Go's ``Duration.String()`` does."""
    if seconds == 0:
        return "0s"
    sign = "-" if seconds < 0 else ""
    seconds = abs(seconds)
    hours, rem = divmod(seconds, 3600)
    minutes, secs = divmod(rem, 60)
    if hours:
        return f"{sign}{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{sign}{minutes}m{secs}s"
    return f"{sign}{secs}s"
