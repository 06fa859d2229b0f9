#!/usr/bin/env python
from typing import Dict
from typing import Optional

nsmap: Dict[str, str] = {
    "m": "http://schemas.microsoft.com/exchange/services/2006/messages",
    "t": "http://schemas.microsoft.com/exchange/services/2006/types",
}

## The SOAP envelope is the transport's business, so it is kept out of
## the namespace list used for request bodies.
nsmap2: Dict[str, str] = nsmap.copy()
nsmap2["s"] = "http://schemas.xmlsoap.org/soap/envelope/"

MNS = nsmap["m"]
TNS = nsmap["t"]


def ns(prefix: str, tag: Optional[str] = None) -> str:
    name = "{%s}" % nsmap2[prefix]
    if tag is not None:
        name = "%s%s" % (name, tag)
    return name
