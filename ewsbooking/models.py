"""
Domain objects for resource bookings.

These are plain data holders; they know nothing about EWS or XML.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Union


@dataclass(frozen=True)
class Booking:
    """
    One calendar item on a resource.

    Attributes:
        event_name: Subject of the item
        is_all_day_event: True for all-day events
        location: Location text
        start_time: Start as unix timestamp
        end_time: End as unix timestamp
        body: Plain-text body, "" when there is none
    """

    event_name: Optional[str] = None
    is_all_day_event: bool = False
    location: Optional[str] = None
    start_time: Optional[int] = None
    end_time: Optional[int] = None
    body: str = ""


@dataclass(frozen=True)
class Calendar:
    """
    The bookings on a resource within an interval.

    Bookings are kept in the order Exchange listed them.  The resource and the
    interval are fixed once the calendar is made; only the bookings list grows.

    Attributes:
        resource: Mailbox address of the resource
        start_time: Start of the interval, as given by the caller
        end_time: End of the interval, as given by the caller
        bookings: Bookings found in the interval
    """

    resource: str
    start_time: Union[int, float, datetime]
    end_time: Union[int, float, datetime]
    bookings: List[Booking] = field(default_factory=list)

    def add_booking(self, booking: Booking) -> None:
        self.bookings.append(booking)

