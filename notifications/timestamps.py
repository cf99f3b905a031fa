"""
Display timestamps for notifications, and turning them back into datetimes.

Two display styles exist side by side in a merged feed:

* relative: "Just now", "5 minutes ago", "2 hours ago", "3 days ago"
* absolute: "Oct 19, 2026, 06:42 PM" in the project time zone

``effective_timestamp`` accepts either style (and ISO-8601) so the feed can be
ordered by recency no matter which source an entry came from.
"""
from datetime import datetime, timedelta
import re

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

ABSOLUTE_FORMAT = '%b %d, %Y, %I:%M %p'

RELATIVE_PATTERN = re.compile(r'^\s*(\d+)\s+(second|minute|hour|day)s?\s+ago', re.IGNORECASE)

UNIT_SECONDS = {
    'second': 1,
    'minute': 60,
    'hour': 60 * 60,
    'day': 24 * 60 * 60,
}

# Relative display switches to the absolute date after a week
RELATIVE_CUTOFF = timedelta(days=7)


def _plural(count, unit):
    return f"{count} {unit}{'' if count == 1 else 's'} ago"


def format_absolute(value):
    """'Oct 9, 2026, 06:42 PM' in the current time zone"""
    local = timezone.localtime(value)
    return f"{local:%b} {local.day}, {local:%Y, %I:%M %p}"


def format_relative(value, now=None):
    now = now or timezone.now()
    elapsed = now - value

    if elapsed < timedelta(minutes=1):
        return 'Just now'
    if elapsed < timedelta(hours=1):
        return _plural(int(elapsed.total_seconds() // 60), 'minute')
    if elapsed < timedelta(days=1):
        return _plural(int(elapsed.total_seconds() // 3600), 'hour')
    if elapsed < RELATIVE_CUTOFF:
        return _plural(elapsed.days, 'day')
    return format_absolute(value)


def format_timestamp(value, style='relative', now=None):
    if style == 'absolute':
        return format_absolute(value)
    return format_relative(value, now=now)


def effective_timestamp(value, now=None):
    """
    Best-effort datetime for a display timestamp; None when it can't be read.

    Relative strings resolve to ``now`` minus the offset. Everything else is
    tried as ISO-8601 datetime, ISO date, then the absolute display format.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if timezone.is_aware(value) else timezone.make_aware(value)
    if not isinstance(value, str):
        return None

    now = now or timezone.now()
    text = value.strip()
    if not text:
        return None

    if text.lower().startswith('just now'):
        return now

    match = RELATIVE_PATTERN.match(text)
    if match:
        amount, unit = int(match.group(1)), match.group(2).lower()
        return now - timedelta(seconds=amount * UNIT_SECONDS[unit])

    parsed = None
    try:
        parsed = parse_datetime(text)
        if parsed is None:
            day = parse_date(text)
            if day is not None:
                parsed = datetime(day.year, day.month, day.day)
    except ValueError:
        parsed = None

    if parsed is None:
        try:
            parsed = datetime.strptime(text, ABSOLUTE_FORMAT)
        except ValueError:
            return None

    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed
