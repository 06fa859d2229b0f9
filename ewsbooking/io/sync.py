"""
Synchronous SOAP transport using the requests library.
"""

import logging
from typing import Optional

import requests
from lxml import etree
from lxml.etree import _Element

from ewsbooking.lib import error
from ewsbooking.lib.debug import xmlstring
from ewsbooking.lib.namespace import ns
from ewsbooking.lib.namespace import nsmap2
from ewsbooking.lib.python_utilities import to_wire
from ewsbooking.protocol.types import EWSOperation

log = logging.getLogger("ewsbooking")


class SoapTransport:
    """
    Synchronous transport POSTing SOAP 1.1 envelopes to an EWS endpoint.

    Example:
        transport = SoapTransport(
            "https://mail.example.com/EWS/Exchange.asmx",
            username="user",
            password="pass",
        )
        xml = transport.send("GetItem", body)
    """

    def __init__(
        self,
        url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        auth_type: str = "basic",
        server_version: str = "Exchange2010",
        timeout: float = 30.0,
        verify: bool = True,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the transport.

        Args:
            url: EWS endpoint, usually ending in /EWS/Exchange.asmx
            username: Username for authentication
            password: Password for authentication
            auth_type: "basic" or "digest"
            server_version: Sent as RequestServerVersion
            timeout: Request timeout in seconds
            verify: Verify SSL certificates
            session: Existing requests Session to use (creates new if None)
        """
        self.url = url
        self.server_version = server_version
        self.timeout = timeout
        self.verify = verify
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.auth = None
        if username and password:
            if auth_type == "digest":
                self.auth = requests.auth.HTTPDigestAuth(username, password)
            elif auth_type == "basic":
                self.auth = requests.auth.HTTPBasicAuth(username, password)
            else:
                raise ValueError("unsupported auth_type %s" % auth_type)

    def envelope(self, body: str, impersonation: Optional[str] = None) -> bytes:
        """
        Wrap a body fragment in a SOAP envelope.

        Args:
            body: XML fragment for soap:Body
            impersonation: Primary SMTP address to impersonate, if any

        Returns:
            UTF-8 encoded XML bytes
        """
        root = etree.Element(ns("s", "Envelope"), nsmap=nsmap2)
        header = etree.SubElement(root, ns("s", "Header"))
        etree.SubElement(
            header, ns("t", "RequestServerVersion"), Version=self.server_version
        )
        if impersonation:
            header.append(_impersonation_header(impersonation))
        soap_body = etree.SubElement(root, ns("s", "Body"))
        soap_body.append(etree.fromstring(to_wire(body)))
        return etree.tostring(root, encoding="utf-8", xml_declaration=True)

    def send(
        self,
        operation: str,
        body: str,
        impersonation: Optional[str] = None,
    ) -> bytes:
        """
        POST an EWS request and return the response body.

        Raises:
            AuthorizationError: On HTTP 401 or 403
            GetItemError, FindItemError, ResponseError: On other non-2xx
                responses (EWS reports SOAP faults as HTTP 500)
        """
        data = self.envelope(body, impersonation)
        headers = {
            "Content-Type": "text/xml; charset=utf-8",
            "SOAPAction": EWSOperation(operation).soap_action,
        }
        log.debug(
            "sending request - operation={0}, url={1}, impersonation={2}".format(
                operation, self.url, impersonation
            )
        )
        if error.debug_dump_communication:
            log.debug("request body:\n%s" % xmlstring(data))

        r = self.session.post(
            self.url,
            data=data,
            headers=headers,
            auth=self.auth,
            timeout=self.timeout,
            verify=self.verify,
        )
        log.debug("server responded with %i %s" % (r.status_code, r.reason))
        if error.debug_dump_communication:
            log.debug("response body:\n%s" % xmlstring(r.content))

        if r.status_code in (401, 403):
            raise error.AuthorizationError(url=self.url, reason=error.errmsg(r))
        if not 200 <= r.status_code < 300:
            raise error.exception_by_operation[operation](
                url=self.url, reason=error.errmsg(r)
            )
        return r.content

    def close(self) -> None:
        """Close the session if we created it."""
        if self._owns_session and self.session:
            self.session.close()

    def __enter__(self) -> "SoapTransport":
        """Context manager entry."""
        return self

    def __exit__(self, *args) -> None:
        """Context manager exit."""
        self.close()


def _impersonation_header(mailbox: str) -> _Element:
    impersonation = etree.Element(ns("t", "ExchangeImpersonation"))
    connecting_sid = etree.SubElement(impersonation, ns("t", "ConnectingSID"))
    address = etree.SubElement(connecting_sid, ns("t", "PrimarySmtpAddress"))
    address.text = mailbox
    return impersonation
