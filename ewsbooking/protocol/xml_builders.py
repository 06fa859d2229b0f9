"""
Pure functions for building EWS XML request bodies.

All functions in this module are pure - they take data in and return XML out,
with no side effects or I/O.  The returned fragment is what goes inside
soap:Body; the envelope belongs to the transport.
"""
from datetime import datetime
from datetime import timezone
from typing import List
from typing import Optional
from typing import Union

from lxml import etree
from lxml.etree import _Element

from ewsbooking.lib import error
from ewsbooking.lib.namespace import MNS
from ewsbooking.lib.namespace import ns
from ewsbooking.lib.namespace import TNS

## Fields requested by GetItem.  For other available fields, see
## https://msdn.microsoft.com/en-us/library/office/aa494315(v=exchg.140).aspx
CALENDAR_ITEM_FIELDS: List[str] = [
    "calendar:IsAllDayEvent",
    "calendar:End",
    "calendar:Start",
    "calendar:Location",
    "item:Subject",
    "item:Body",
]

## The body fragment declares the types prefix itself; the messages
## namespace is the default one, as EWS examples write it.
_body_nsmap = {None: MNS, "t": TNS}

Timestamp = Union[int, float, str, datetime]


def build_get_item_body(item_id: str, change_key: Optional[str]) -> str:
    """
    Build GetItem request body XML.

    Args:
        item_id: Exchange item id, as found in a FindItem response
        change_key: Exchange change key (revision id) for the item.  Exchange
            serves the current revision when it is None

    Returns:
        The GetItem element serialized as a string
    """
    root = etree.Element(ns("m", "GetItem"), nsmap=_body_nsmap)
    _item_shape(root, additional_fields=CALENDAR_ITEM_FIELDS)
    item_ids = etree.SubElement(root, ns("m", "ItemIds"))
    item = etree.SubElement(item_ids, ns("t", "ItemId"), Id=item_id)
    if change_key is not None:
        item.set("ChangeKey", change_key)
    return _tostring(root)


def build_find_item_body(
    resource_email: str,
    start: Timestamp,
    end: Timestamp,
) -> str:
    """
    Build FindItem request body XML.

    Only item ids are requested; the full fields for each item must be
    fetched with a follow-up GetItem.

    Args:
        resource_email: Mailbox address of the resource whose calendar to list
        start: Start of the calendar view, unix timestamp or datetime
        end: End of the calendar view, unix timestamp or datetime

    Returns:
        The FindItem element serialized as a string
    """
    root = etree.Element(ns("m", "FindItem"), nsmap=_body_nsmap, Traversal="Shallow")
    _item_shape(root)
    etree.SubElement(
        root,
        ns("m", "CalendarView"),
        StartDate=format_timestamp(start),
        EndDate=format_timestamp(end),
    )
    parent_folder_ids = etree.SubElement(root, ns("m", "ParentFolderIds"))
    folder_id = etree.SubElement(
        parent_folder_ids, ns("t", "DistinguishedFolderId"), Id="calendar"
    )
    mailbox = etree.SubElement(folder_id, ns("t", "Mailbox"))
    email = etree.SubElement(mailbox, ns("t", "EmailAddress"))
    email.text = resource_email
    return _tostring(root)


def format_timestamp(value: Timestamp) -> str:
    """
    ISO-8601 rendering of a unix timestamp or datetime, like
    ``2024-01-01T10:00:00+00:00``.  Naive datetimes are taken to be UTC,
    numeric strings (as from the environment or a config file) are read
    as unix timestamps.

    Values that can not be rendered (NaN, out of range, not a number)
    are logged and passed on as their plain string form; Exchange will
    complain about them, this function does not.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.replace(microsecond=0).isoformat()
    try:
        if isinstance(value, str):
            value = float(value.strip())
        dt = datetime.fromtimestamp(value, tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        error.weirdness("can not render timestamp", repr(value))
        return str(value)
    return dt.replace(microsecond=0).isoformat()


def _item_shape(root: _Element, additional_fields: List[str] = None) -> _Element:
    item_shape = etree.SubElement(root, ns("m", "ItemShape"))
    base_shape = etree.SubElement(item_shape, ns("t", "BaseShape"))
    base_shape.text = "IdOnly"
    if additional_fields:
        body_type = etree.SubElement(item_shape, ns("t", "BodyType"))
        body_type.text = "Text"
        properties = etree.SubElement(item_shape, ns("t", "AdditionalProperties"))
        for field_uri in additional_fields:
            etree.SubElement(properties, ns("t", "FieldURI"), FieldURI=field_uri)
    return item_shape


def _tostring(root: _Element) -> str:
    return etree.tostring(root, encoding="unicode")
