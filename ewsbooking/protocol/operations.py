"""
EWS protocol operations combining request building and response parsing.

This class provides a high-level interface to the two EWS operations
needed for reading resource calendars, while remaining completely I/O-free.
"""

from typing import List, Optional, Union

from .types import EWSOperation, EWSRequest, ItemId, NodeMapping
from .xml_builders import Timestamp, build_find_item_body, build_get_item_body
from .xml_parsers import parse_calendar_item, parse_item_ids


class EWSProtocol:
    """
    Sans-I/O EWS protocol handler.

    Builds requests and parses responses without doing any I/O.
    Sending is delegated to a transport (see ewsbooking.io).

    Example:
        protocol = EWSProtocol()

        # Build request
        request = protocol.find_item_request("room@example.com", t0, t1)

        # Send with your transport (not shown)
        xml = transport.send(request.operation.value, request.body)

        # Parse response
        item_ids = protocol.parse_find_item(xml)
    """

    def __init__(self, huge_tree: bool = False):
        """
        Initialize the protocol handler.

        Args:
            huge_tree: Allow parsing very large XML documents
        """
        self.huge_tree = huge_tree

    # =========================================================================
    # Request builders
    # =========================================================================

    def get_item_request(
        self,
        item_id: str,
        change_key: Optional[str] = None,
        impersonation: Optional[str] = None,
    ) -> EWSRequest:
        """
        Build a GetItem request for one calendar item.

        Args:
            item_id: Exchange item id
            change_key: Exchange change key (revision id)
            impersonation: Mailbox to act as, if any

        Returns:
            EWSRequest ready for the transport
        """
        return EWSRequest(
            operation=EWSOperation.GET_ITEM,
            body=build_get_item_body(item_id, change_key),
            impersonation=impersonation,
        )

    def find_item_request(
        self,
        resource_email: str,
        start: Timestamp,
        end: Timestamp,
        impersonation: Optional[str] = None,
    ) -> EWSRequest:
        """
        Build a FindItem request listing the items in a calendar view.

        Args:
            resource_email: Mailbox of the resource
            start: Start of the range (unix timestamp or datetime)
            end: End of the range (unix timestamp or datetime)
            impersonation: Mailbox to act as, if any

        Returns:
            EWSRequest ready for the transport
        """
        return EWSRequest(
            operation=EWSOperation.FIND_ITEM,
            body=build_find_item_body(resource_email, start, end),
            impersonation=impersonation,
        )

    # =========================================================================
    # Response parsers
    # =========================================================================

    def parse_get_item(self, xml: Union[str, bytes]) -> Optional[NodeMapping]:
        """
        Parse a GetItem response.

        Returns:
            The item fields, or None if the response holds no CalendarItem
        """
        return parse_calendar_item(xml, huge_tree=self.huge_tree)

    def parse_find_item(self, xml: Union[str, bytes]) -> List[ItemId]:
        """
        Parse a FindItem response.

        Returns:
            Item ids in response order
        """
        return parse_item_ids(xml, huge_tree=self.huge_tree)
