#!/usr/bin/env python
"""
The ``ExchangeWebService`` class answers booking queries for a resource
mailbox.  It builds the requests with ``ewsbooking.protocol``, hands them
to a transport and turns the responses into a ``Calendar``.

The transport is anything with a ``send(operation, body,
impersonation=None)`` method, see ``ewsbooking.io.SyncTransportProtocol``.
``get_service`` gives an ``ExchangeWebService`` on top of a
``SoapTransport`` configured from parameters, environment variables or a
configuration file.
"""
import logging
import os
from typing import Optional

from ewsbooking.io.base import SyncTransportProtocol
from ewsbooking.io.sync import SoapTransport
from ewsbooking.lib import error
from ewsbooking.models import Calendar
from ewsbooking.projection import project_booking
from ewsbooking.protocol.operations import EWSProtocol
from ewsbooking.protocol.types import EWSRequest, NodeMapping
from ewsbooking.protocol.xml_builders import Timestamp

log = logging.getLogger("ewsbooking")

## Connection parameters understood by SoapTransport
TRANSPORT_KEYS = (
    "url",
    "username",
    "password",
    "auth_type",
    "server_version",
    "timeout",
    "verify",
)


class ExchangeWebService:
    """
    Reads bookings on Exchange resources.

    Example:
        service = ExchangeWebService(transport)
        calendar = service.get_resource_bookings("room@example.com", t0, t1)
        for booking in calendar.bookings:
            print(booking.event_name, booking.start_time)
    """

    def __init__(
        self,
        transport: SyncTransportProtocol,
        impersonate: bool = False,
        huge_tree: bool = False,
    ) -> None:
        """
        Args:
            transport: Sends the requests (owns auth and the SOAP envelope)
            impersonate: Act as the resource mailbox when querying it
            huge_tree: Allow parsing very large XML documents
        """
        self.transport = transport
        self.impersonate = impersonate
        self.protocol = EWSProtocol(huge_tree=huge_tree)

    def _send(self, request: EWSRequest):
        if request.impersonation:
            return self.transport.send(
                request.operation.value,
                request.body,
                impersonation=request.impersonation,
            )
        return self.transport.send(request.operation.value, request.body)

    def get_booking(
        self,
        item_id: str,
        change_key: Optional[str] = None,
        impersonation: Optional[str] = None,
    ) -> Optional[NodeMapping]:
        """
        Get the fields of a single booking.

        Args:
            item_id: The Exchange id of the booking
            change_key: The Exchange change key (revision id)
            impersonation: Mailbox to act as, if any

        Returns:
            The CalendarItem fields, or None if Exchange returned no item
        """
        request = self.protocol.get_item_request(
            item_id, change_key, impersonation=impersonation
        )
        return self.protocol.parse_get_item(self._send(request))

    def get_resource_bookings(
        self,
        resource: str,
        start: Timestamp,
        end: Timestamp,
    ) -> Calendar:
        """
        Get the bookings on a resource.

        FindItem lists the item ids in the interval, then every item is
        fetched with its own GetItem.  Items that have disappeared in
        between are logged and skipped.

        Args:
            resource: Mailbox address of the resource
            start: Start of the interval (unix timestamp or datetime)
            end: End of the interval (unix timestamp or datetime)

        Returns:
            Calendar with the bookings in the order Exchange listed them
        """
        calendar = Calendar(resource, start, end)
        impersonation = resource if self.impersonate else None

        request = self.protocol.find_item_request(
            resource, start, end, impersonation=impersonation
        )
        item_ids = self.protocol.parse_find_item(self._send(request))
        log.debug("%i items found on %s" % (len(item_ids), resource))

        for item_id in item_ids:
            fields = self.get_booking(
                item_id.id, item_id.change_key, impersonation=impersonation
            )
            if fields is None:
                log.warning(
                    "item %s on %s listed by FindItem but not returned by GetItem, skipping"
                    % (item_id.id, resource)
                )
                continue
            calendar.add_booking(project_booking(fields))

        return calendar


def get_service(
    check_config_file: bool = True,
    config_file: str = None,
    config_section: str = None,
    environment: bool = True,
    **config_data,
) -> Optional[ExchangeWebService]:
    """
    This function will yield an ExchangeWebService object on top of a
    SoapTransport.  It will not try to connect.  It will read
    configuration from various sources, dependent on the parameters
    given, in this order:

    * Data from the parameters given
    * Environment variables prepended with `EWS_`, like `EWS_URL`,
      `EWS_USERNAME`, `EWS_PASSWORD`, `EWS_IMPERSONATE`.
    * Environment variables `EWS_CONFIG_FILE` and `EWS_CONFIG_SECTION`
      will be honored if environment is set
    * Configuration file, keys prepended with `ews_` in the given section

    Returns None if no configuration was found.
    """
    if config_data:
        return _service_from_params(config_data)

    if environment:
        conf = {}
        for conf_key in (
            x
            for x in os.environ
            if x.startswith("EWS_") and not x.startswith("EWS_CONFIG")
        ):
            conf[conf_key[4:].lower()] = os.environ[conf_key]
        if conf:
            return _service_from_params(conf)
        if not config_file:
            config_file = os.environ.get("EWS_CONFIG_FILE")
        if not config_section:
            config_section = os.environ.get("EWS_CONFIG_SECTION")

    if check_config_file:
        from ewsbooking import config

        if not config_section:
            config_section = "default"

        cfg = config.read_config(config_file)
        if cfg:
            section = config.config_section(cfg, config_section)
            conn_params = {}
            for k in section:
                if k.startswith("ews_") and section[k] is not None:
                    key = k[4:]
                    if key == "pass":
                        key = "password"
                    if key == "user":
                        key = "username"
                    conn_params[key] = section[k]
            if conn_params:
                return _service_from_params(conn_params)

    return None


def _service_from_params(params: dict) -> ExchangeWebService:
    params = dict(params)
    impersonate = _to_bool(params.pop("impersonate", False))
    huge_tree = _to_bool(params.pop("huge_tree", False))
    unknown = set(params) - set(TRANSPORT_KEYS)
    if unknown:
        error.weirdness("ignoring unknown connection parameters", ", ".join(sorted(unknown)))
    transport_params = {k: params[k] for k in TRANSPORT_KEYS if k in params}
    if "url" not in transport_params:
        raise error.EWSError(reason="no EWS url configured")
    if "timeout" in transport_params:
        transport_params["timeout"] = float(transport_params["timeout"])
    if "verify" in transport_params:
        transport_params["verify"] = _to_bool(transport_params["verify"])
    return ExchangeWebService(
        SoapTransport(**transport_params),
        impersonate=impersonate,
        huge_tree=huge_tree,
    )


def _to_bool(value) -> bool:
    ## environment variables and config files give strings
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)
