"""
Canned server answers and a fake transport.

The fake transport is a Mock whose ``execute`` looks the request up in a
routing table keyed on (method, url).  A value in the table is either a
DAVResponse, an exception to raise, or a list of those handed out one
after the other.
"""
from unittest.mock import Mock

import pytest

from minicaldav.protocol.types import DAVResponse

BASE_URL = "http://localhost:8000/"

PRINCIPAL_RESPONSE = b"""<?xml version="1.0" encoding="utf-8"?>
<d:multistatus xmlns:d="DAV:">
  <d:response>
    <d:href>/</d:href>
    <d:propstat>
      <d:prop>
        <d:current-user-principal>
          <d:href>/principals/users/1</d:href>
        </d:current-user-principal>
      </d:prop>
      <d:status>HTTP/1.1 200 OK</d:status>
    </d:propstat>
  </d:response>
</d:multistatus>
"""

HOME_SET_RESPONSE = b"""<?xml version="1.0" encoding="utf-8"?>
<d:multistatus xmlns:d="DAV:" xmlns:cal="urn:ietf:params:xml:ns:caldav">
  <d:response>
    <d:href>/principals/users/1</d:href>
    <d:propstat>
      <d:prop>
        <cal:calendar-home-set>
          <d:href>/caldav/</d:href>
        </cal:calendar-home-set>
      </d:prop>
      <d:status>HTTP/1.1 200 OK</d:status>
    </d:propstat>
  </d:response>
</d:multistatus>
"""

## Six collections, three of which are worth listing:
## - the home-set itself (plain collection)
## - "Calendar", events and todos, writable
## - "Birthdays", events, read only, property in a second propstat
## - "Holidays", a subscription
## - "Journal", a calendar without events or todos
## - a calendar without displayname
CALENDARS_RESPONSE = b"""<?xml version="1.0" encoding="utf-8"?>
<d:multistatus xmlns:d="DAV:" xmlns:cal="urn:ietf:params:xml:ns:caldav"
               xmlns:cs="http://calendarserver.org/ns/"
               xmlns:x1="http://apple.com/ns/ical/">
  <d:response>
    <d:href>/caldav/</d:href>
    <d:propstat>
      <d:prop>
        <d:resourcetype><d:collection/></d:resourcetype>
      </d:prop>
      <d:status>HTTP/1.1 200 OK</d:status>
    </d:propstat>
  </d:response>
  <d:response>
    <d:href>/caldav/ABC0815/</d:href>
    <d:propstat>
      <d:prop>
        <d:displayname>Calendar</d:displayname>
        <x1:calendar-color>#0082c9</x1:calendar-color>
        <d:resourcetype><d:collection/><cal:calendar/></d:resourcetype>
        <d:current-user-privilege-set>
          <d:privilege><d:read/></d:privilege>
          <d:privilege><d:write/></d:privilege>
          <d:privilege><d:write-content/></d:privilege>
        </d:current-user-privilege-set>
        <cal:supported-calendar-component-set>
          <cal:comp name="VEVENT"/>
          <cal:comp name="VTODO"/>
        </cal:supported-calendar-component-set>
      </d:prop>
      <d:status>HTTP/1.1 200 OK</d:status>
    </d:propstat>
  </d:response>
  <d:response>
    <d:href>/caldav/ABC0816/</d:href>
    <d:propstat>
      <d:prop>
        <x1:calendar-color/>
      </d:prop>
      <d:status>HTTP/1.1 404 Not Found</d:status>
    </d:propstat>
    <d:propstat>
      <d:prop>
        <d:displayname>Birthdays</d:displayname>
        <d:resourcetype><d:collection/><cal:calendar/></d:resourcetype>
        <d:current-user-privilege-set>
          <d:privilege><d:read/></d:privilege>
        </d:current-user-privilege-set>
        <cal:supported-calendar-component-set>
          <cal:comp name="VEVENT"/>
        </cal:supported-calendar-component-set>
      </d:prop>
      <d:status>HTTP/1.1 200 OK</d:status>
    </d:propstat>
  </d:response>
  <d:response>
    <d:href>/caldav/holidays/</d:href>
    <d:propstat>
      <d:prop>
        <d:displayname>Holidays</d:displayname>
        <d:resourcetype><d:collection/><cs:subscribed/></d:resourcetype>
        <cal:supported-calendar-component-set>
          <cal:comp name="VEVENT"/>
        </cal:supported-calendar-component-set>
      </d:prop>
      <d:status>HTTP/1.1 200 OK</d:status>
    </d:propstat>
  </d:response>
  <d:response>
    <d:href>/caldav/journal/</d:href>
    <d:propstat>
      <d:prop>
        <d:displayname>Journal</d:displayname>
        <d:resourcetype><d:collection/><cal:calendar/></d:resourcetype>
        <cal:supported-calendar-component-set>
          <cal:comp name="VJOURNAL"/>
        </cal:supported-calendar-component-set>
      </d:prop>
      <d:status>HTTP/1.1 200 OK</d:status>
    </d:propstat>
  </d:response>
  <d:response>
    <d:href>/caldav/nameless/</d:href>
    <d:propstat>
      <d:prop>
        <d:resourcetype><d:collection/><cal:calendar/></d:resourcetype>
        <cal:supported-calendar-component-set>
          <cal:comp name="VEVENT"/>
        </cal:supported-calendar-component-set>
      </d:prop>
      <d:status>HTTP/1.1 200 OK</d:status>
    </d:propstat>
  </d:response>
  <d:response>
    <d:href>/caldav/inbox/</d:href>
    <d:propstat>
      <d:prop>
        <d:displayname>Inbox</d:displayname>
        <d:resourcetype><d:collection/><cal:schedule-inbox/></d:resourcetype>
        <cal:supported-calendar-component-set>
          <cal:comp name="VEVENT"/>
          <cal:comp name="VTODO"/>
        </cal:supported-calendar-component-set>
      </d:prop>
      <d:status>HTTP/1.1 200 OK</d:status>
    </d:propstat>
  </d:response>
</d:multistatus>
"""

EVENT_TIMEZONE = """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//Example Corp.//CalDAV Client//EN
BEGIN:VEVENT
UID:20220520T101010-1@example.com
DTSTAMP:20220520T101010Z
DTSTART;TZID=Europe/Berlin:20220521T100000
DTEND;TZID=Europe/Berlin:20220521T110000
SUMMARY:Event with timezone
SEQUENCE:4
END:VEVENT
END:VCALENDAR
"""

EVENT_YEARLY = """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//Example Corp.//CalDAV Client//EN
BEGIN:VEVENT
UID:20220520T101010-2@example.com
DTSTAMP:20220520T101010Z
DTSTART;VALUE=DATE:20220601
RRULE:FREQ=YEARLY
SUMMARY:Yearly event
END:VEVENT
END:VCALENDAR
"""

## END:VEVENT is missing
EVENT_BROKEN = """BEGIN:VCALENDAR
VERSION:2.0
BEGIN:VEVENT
UID:20220520T101010-3@example.com
SUMMARY:Broken event
END:VCALENDAR
"""


def multistatus(*entries):
    """
    A calendar-query answer.  ``entries`` are (href, etag, data) tuples,
    None leaves the element out.
    """
    parts = [
        '<?xml version="1.0" encoding="utf-8"?>',
        '<d:multistatus xmlns:d="DAV:" xmlns:cal="urn:ietf:params:xml:ns:caldav">',
    ]
    for href, etag, data in entries:
        parts.append("<d:response>")
        if href is not None:
            parts.append("<d:href>%s</d:href>" % href)
        parts.append("<d:propstat><d:prop>")
        if etag is not None:
            parts.append("<d:getetag>%s</d:getetag>" % etag.replace('"', "&quot;"))
        if data is not None:
            parts.append("<cal:calendar-data>%s</cal:calendar-data>" % data)
        parts.append("</d:prop><d:status>HTTP/1.1 200 OK</d:status></d:propstat>")
        parts.append("</d:response>")
    parts.append("</d:multistatus>")
    return "\n".join(parts).encode("utf-8")


def response(status=207, body=b"", headers=None, url=""):
    return DAVResponse(status=status, headers=headers or {}, body=body, url=url)


def make_io(routes):
    """
    A transport answering from ``routes``; unknown requests fail the
    test.  Sent requests are available as ``io.requests``.
    """
    io = Mock()
    io.requests = []

    def execute(request):
        io.requests.append(request)
        key = (request.method.value, request.url)
        if key not in routes:
            raise AssertionError("request %s %s not mocked" % key)
        answer = routes[key]
        if isinstance(answer, list):
            answer = answer.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer

    io.execute = Mock(side_effect=execute)
    return io


@pytest.fixture
def discovery_routes():
    return {
        ("PROPFIND", BASE_URL): response(body=PRINCIPAL_RESPONSE),
        ("PROPFIND", "http://localhost:8000/principals/users/1"): response(
            body=HOME_SET_RESPONSE
        ),
    }
