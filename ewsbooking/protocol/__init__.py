"""
Sans-I/O EWS protocol implementation.

This module provides protocol-level operations without any I/O.
It builds request bodies and parses responses as pure data transformations.

The protocol layer is organized into:
- types: Core data structures (EWSOperation, EWSRequest, ItemId, NodeMapping)
- xml_builders: Pure functions to build XML request bodies
- xml_parsers: Pure functions to parse XML response bodies
- operations: High-level EWSProtocol class combining builders and parsers

Example usage:

    from ewsbooking.protocol import EWSProtocol

    protocol = EWSProtocol()

    # Build a request (no I/O)
    request = protocol.get_item_request(item_id, change_key)

    # Send via your preferred transport
    xml = transport.send(request.operation.value, request.body)

    # Parse response (no I/O)
    fields = protocol.parse_get_item(xml)
"""

from .types import (
    ATTRIBUTE_PREFIX,
    EWSOperation,
    EWSRequest,
    ItemId,
    NodeMapping,
)
from .xml_builders import (
    build_find_item_body,
    build_get_item_body,
    format_timestamp,
)
from .xml_parsers import (
    node_to_mapping,
    parse_calendar_item,
    parse_calendar_items,
    parse_item_ids,
)
from .operations import EWSProtocol

__all__ = [
    # Types
    "ATTRIBUTE_PREFIX",
    "EWSOperation",
    "EWSRequest",
    "ItemId",
    "NodeMapping",
    # XML Builders
    "build_find_item_body",
    "build_get_item_body",
    "format_timestamp",
    # XML Parsers
    "node_to_mapping",
    "parse_calendar_item",
    "parse_calendar_items",
    "parse_item_ids",
    # Protocol
    "EWSProtocol",
]
