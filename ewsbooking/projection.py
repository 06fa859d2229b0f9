"""
Turns the generic field mapping of a GetItem response into a Booking.
"""

import logging
from datetime import timezone
from typing import Optional

from dateutil.parser import isoparse

from ewsbooking.models import Booking
from ewsbooking.protocol.types import NodeMapping

log = logging.getLogger(__name__)


def parse_ews_datetime(value) -> Optional[int]:
    """
    Unix timestamp from an EWS date string like ``2024-01-01T10:00:00Z``.

    Values without an offset are taken to be UTC.  A missing value gives
    None, and so does a malformed one (with a warning): bad dates on a
    single booking are not worth failing the whole calendar for.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        log.warning("ignoring non-textual date %r" % (value,))
        return None
    try:
        dt = isoparse(value.strip())
    except (ValueError, OverflowError):
        log.warning("could not parse date %r" % value)
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp())


def project_booking(fields: NodeMapping) -> Booking:
    """
    Build a Booking from the fields of a CalendarItem.

    Args:
        fields: Mapping as returned by parse_calendar_item

    Returns:
        The booking.  IsAllDayEvent counts only when it is exactly "true";
        a Body that is missing or not plain text gives ""
    """
    body = fields.get("Body", "")
    if not isinstance(body, str):
        body = ""

    return Booking(
        event_name=_text(fields, "Subject"),
        is_all_day_event=fields.get("IsAllDayEvent") == "true",
        location=_text(fields, "Location"),
        start_time=parse_ews_datetime(fields.get("Start")),
        end_time=parse_ews_datetime(fields.get("End")),
        body=body,
    )


def _text(fields: NodeMapping, key: str) -> Optional[str]:
    value = fields.get(key)
    if isinstance(value, str):
        return value
    return None
