"""
Core protocol types for the Sans-I/O EWS implementation.

These dataclasses describe what should be sent to Exchange and what came
back, independent of any transport.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict
from typing import Optional
from typing import Union

## Prefix separating attribute keys from child element keys in a NodeMapping
ATTRIBUTE_PREFIX = "@"

## The generic intermediate form produced by node_to_mapping: local name
## of an attribute or child element -> leaf text or a nested mapping.
NodeMapping = Dict[str, Union[str, "NodeMapping"]]


class EWSOperation(Enum):
    """EWS operations this library knows how to build and parse."""

    GET_ITEM = "GetItem"
    FIND_ITEM = "FindItem"

    @property
    def soap_action(self) -> str:
        return (
            "http://schemas.microsoft.com/exchange/services/2006/messages/%s"
            % self.value
        )


@dataclass(frozen=True)
class EWSRequest:
    """
    Represents an EWS request to be made.

    This is a pure data structure with no I/O.  It carries the body
    fragment only; the SOAP envelope is added by the transport.

    Attributes:
        operation: The EWS operation
        body: XML body fragment (the element inside soap:Body)
        impersonation: Mailbox to impersonate, if any
    """

    operation: EWSOperation
    body: str
    impersonation: Optional[str] = None


@dataclass(frozen=True)
class ItemId:
    """
    Identifies one revision of an Exchange item.

    Attributes:
        id: The Exchange item id
        change_key: The revision identifier, if the response carried one
    """

    id: str
    change_key: Optional[str] = None
