#!/usr/bin/env python
from typing import Dict
from typing import Optional

nsmap: Dict[str, str] = {
    "D": "DAV:",
    "C": "urn:ietf:params:xml:ns:caldav",
}

## Quite many caldav servers and clients support the apple namespace
## for calendar-color, the calendarserver namespace for subscriptions
## and the owncloud namespace for calendar-enabled.  None of them are
## standardized, so they are kept out of the namespace map shipped
## with every request and only declared where used.
nsmap2: Dict[str, str] = nsmap.copy()
nsmap2["I"] = "http://apple.com/ns/ical/"
nsmap2["CS"] = "http://calendarserver.org/ns/"
nsmap2["OC"] = "http://owncloud.org/ns"


def ns(prefix: str, tag: Optional[str] = None) -> str:
    name = "{%s}" % nsmap2[prefix]
    if tag is not None:
        name = "%s%s" % (name, tag)
    return name
