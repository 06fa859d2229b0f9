"""
Transport layer for the EWS protocol.

The transport is intentionally thin - it wraps a body fragment in a SOAP
envelope and POSTs it.  All protocol logic (XML building/parsing) is in
ewsbooking.protocol.

Example:
    from ewsbooking.protocol import EWSProtocol
    from ewsbooking.io import SoapTransport

    protocol = EWSProtocol()
    with SoapTransport("https://mail.example.com/EWS/Exchange.asmx",
                       username="user", password="pass") as transport:
        request = protocol.find_item_request("room@example.com", t0, t1)
        xml = transport.send(request.operation.value, request.body)
        item_ids = protocol.parse_find_item(xml)
"""

from .base import SyncTransportProtocol
from .sync import SoapTransport

__all__ = [
    # Protocols
    "SyncTransportProtocol",
    # Implementations
    "SoapTransport",
]
