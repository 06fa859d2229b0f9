#!/usr/bin/env python
import logging
import os
from collections import defaultdict
from typing import Dict
from typing import Optional
from typing import Type

from ewsbooking import __version__

## Environmental variables prepended with "PYTHON_EWSBOOKING" are used for
## debug purposes, environmental variables prepended with "EWS_" are for
## connection parameters
debug_dump_communication = bool(os.environ.get("PYTHON_EWSBOOKING_COMMDUMP"))
## one of DEBUG_PDB, DEBUG, DEVELOPMENT, PRODUCTION
debugmode = os.environ.get("PYTHON_EWSBOOKING_DEBUGMODE")
if not debugmode:
    if "dev" in __version__:
        debugmode = "DEVELOPMENT"
    else:
        debugmode = "PRODUCTION"

log = logging.getLogger("ewsbooking")
if debugmode.startswith("DEBUG"):
    log.setLevel(logging.DEBUG)


def errmsg(r) -> str:
    """Utility for formatting an error response to an error string"""
    return "%s %s\n\n%s" % (r.status_code, r.reason, r.text)


def weirdness(*reasons):
    from ewsbooking.lib.debug import xmlstring

    reason = " : ".join([xmlstring(x) for x in reasons])
    log.warning(f"Deviation from expectations found: {reason}")
    if debugmode == "DEBUG_PDB":
        log.error(f"Dropping into debugger due to {reason}")
        import pdb

        pdb.set_trace()


class EWSError(Exception):
    url: Optional[str] = None
    reason: str = "no reason"

    def __init__(self, url: Optional[str] = None, reason: Optional[str] = None) -> None:
        if url:
            self.url = url
        if reason:
            self.reason = reason

    def __str__(self) -> str:
        return "%s at '%s', reason %s" % (
            self.__class__.__name__,
            self.url,
            self.reason,
        )


class AuthorizationError(EWSError):
    """
    The transport got an HTTP 401 or 403 from the Exchange server.
    The url property will contain the EWS endpoint, the reason property
    will contain the excuse the server sent.
    """

    pass


class GetItemError(EWSError):
    pass


class FindItemError(EWSError):
    pass


class ResponseError(EWSError):
    pass


exception_by_operation: Dict[str, Type[EWSError]] = defaultdict(
    lambda: ResponseError
)
for operation in ("GetItem", "FindItem"):
    exception_by_operation[operation] = locals()[operation + "Error"]
