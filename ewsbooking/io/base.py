"""
Abstract transport protocol definition.

This module defines the interface a transport must follow to be usable
by ExchangeWebService.
"""

from typing import Optional, Protocol, Union, runtime_checkable


@runtime_checkable
class SyncTransportProtocol(Protocol):
    """
    Protocol defining the synchronous transport interface.

    The transport owns authentication, the SOAP envelope and any
    impersonation header; it is handed only the operation name and the
    operation-specific body fragment.
    """

    def send(
        self,
        operation: str,
        body: str,
        impersonation: Optional[str] = None,
    ) -> Union[str, bytes]:
        """
        Send an EWS request and return the raw XML response.

        Args:
            operation: EWS operation name, like "GetItem"
            body: XML fragment to put inside soap:Body
            impersonation: Primary SMTP address to impersonate, if any

        Returns:
            The response document
        """
        ...
