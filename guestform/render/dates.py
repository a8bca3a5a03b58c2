from __future__ import annotations

import logging
import re
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


logger = logging.getLogger(__name__)

DISPLAY_DATE_FORMAT = '%d-%m-%Y'

# Day-first: the form is filled in the Indian locale.
_DATE_FORMATS = (
    '%d-%m-%Y',
    '%d/%m/%Y',
    '%d.%m.%Y',
    '%Y/%m/%d',
    '%d %b %Y',
    '%d %B %Y',
    '%b %d, %Y',
    '%B %d, %Y',
    '%b %d %Y',
    '%a %b %d %Y',
    '%a, %d %b %Y',
    '%d-%b-%Y',
)

# JavaScript Date.toString(): "Tue Mar 05 2024 05:30:00 GMT+0530 (India Standard Time)"
_JS_DATE_STRING_PATTERN = re.compile(r'^([A-Za-z]{3} [A-Za-z]{3} \d{1,2} \d{4})\b')
_ISO_PATTERN = re.compile(
    r'^(\d{4})-(\d{2})-(\d{2})'
    r'(?:[Tt ](\d{2}):(\d{2})(?::(\d{2})(?:\.\d+)?)?)?'
    r'(?:[Zz]|[+-]\d{2}:?\d{2})?$'
)


def _parse_iso(token: str) -> date | None:
    match = _ISO_PATTERN.match(token)
    if not match:
        return None
    year, month, day, hour, minute, second = (int(part or 0) for part in match.groups())
    try:
        return datetime(year, month, day, hour, minute, second).date()
    except ValueError:
        return None


def parse_date(value: object) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    token = str(value or '').strip()
    if not token:
        return None

    parsed = _parse_iso(token)
    if parsed is not None:
        return parsed

    match = _JS_DATE_STRING_PATTERN.match(token)
    if match:
        token = match.group(1)

    # Time portions are not part of any display format.
    candidate = token.split(',')[0] if re.match(r'^\d', token) else token
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(candidate.strip(), fmt).date()
        except ValueError:
            continue
    return None


def format_display_date(value: object) -> str:
    """Render a date as DD-MM-YYYY; unparseable input is returned unchanged."""
    if value is None:
        return ''
    if isinstance(value, str) and not value.strip():
        return ''
    try:
        parsed = parse_date(value)
    except Exception as exc:
        logger.debug('Failed to parse date %r: %s', value, exc)
        parsed = None
    if parsed is None:
        return str(value)
    return parsed.strftime(DISPLAY_DATE_FORMAT)


def today_display(timezone_name: str | None = None) -> str:
    tz = timezone.utc
    if timezone_name:
        try:
            tz = ZoneInfo(timezone_name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning('Unknown display timezone %s; falling back to UTC', timezone_name)
    return datetime.now(tz).strftime(DISPLAY_DATE_FORMAT)
