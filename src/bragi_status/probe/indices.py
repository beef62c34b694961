"""Decoding of the index naming convention.

Index names follow ``<prefix>_<place type>_<coverage>_<YYYYMMDD>_<HHMMSS>``,
where a coverage starting with ``priv.`` marks a private data source, e.g.
``munin_addr_priv.fr_20200101_000000``.

Malformed dates, times and document counts fall back to fixed values instead
of failing: one oddly named index must not hide the status of the others.
The fallback is lossy, so ``DecodedIndex.fallbacks`` lists which fields used
it. Names with too few tokens cannot be decoded at all and yield a
``MalformedIndex``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import UTC, date, datetime, time

from bragi_status.probe.models import IndexReport, Visibility

SEPARATOR = "_"
PRIVATE_PREFIX = "priv."
MIN_TOKENS = 5

FALLBACK_DATE = date(1970, 1, 1)
FALLBACK_TIME = time(0, 1, 1)

_DIGITS = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class DecodedIndex:
    report: IndexReport
    fallbacks: tuple[str, ...] = ()


@dataclass(frozen=True)
class MalformedIndex:
    label: str
    reason: str


def _parse_date(token: str) -> date | None:
    if len(token) != 8 or not _DIGITS.fullmatch(token):
        return None
    try:
        return datetime.strptime(token, "%Y%m%d").date()
    except ValueError:
        return None


def _parse_time(token: str) -> time | None:
    if len(token) != 6 or not _DIGITS.fullmatch(token):
        return None
    try:
        return datetime.strptime(token, "%H%M%S").time()
    except ValueError:
        return None


def parse_count(raw: str | None) -> int | None:
    """Parse a document count, returning None unless it is a plain digit string."""
    if raw is None or not _DIGITS.fullmatch(raw):
        return None
    return int(raw)


def split_visibility(token: str) -> tuple[Visibility, str]:
    if token.startswith(PRIVATE_PREFIX):
        return Visibility.PRIVATE, token[len(PRIVATE_PREFIX):]
    return Visibility.PUBLIC, token


def decode_index_name(
    label: str,
    count: str | None = None,
    now: datetime | None = None,
) -> DecodedIndex | MalformedIndex:
    """Decode an index name and its raw document count."""
    tokens = label.split(SEPARATOR)
    if len(tokens) < MIN_TOKENS:
        return MalformedIndex(
            label=label,
            reason=f"expected at least {MIN_TOKENS} '{SEPARATOR}'-separated tokens, got {len(tokens)}",
        )

    fallbacks: list[str] = []
    visibility, coverage = split_visibility(tokens[2])

    build_date = _parse_date(tokens[3])
    if build_date is None:
        fallbacks.append("date")
        build_date = FALLBACK_DATE

    build_time = _parse_time(tokens[4])
    if build_time is None:
        fallbacks.append("time")
        build_time = FALLBACK_TIME

    doc_count = parse_count(count)
    if doc_count is None:
        fallbacks.append("count")
        doc_count = 0

    report = IndexReport(
        label=label,
        place_type=tokens[1],
        coverage=coverage,
        visibility=visibility,
        date=datetime.combine(build_date, build_time, tzinfo=UTC),
        count=doc_count,
        updated_at=now or datetime.now(UTC),
    )
    return DecodedIndex(report=report, fallbacks=tuple(fallbacks))
