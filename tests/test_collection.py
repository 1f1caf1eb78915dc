import pytest
from conftest import BASE_URL
from conftest import CALENDARS_RESPONSE
from conftest import make_io
from conftest import response
from lxml import etree

from minicaldav.collection import create_calendar
from minicaldav.collection import list_calendars
from minicaldav.collection import remove_calendar
from minicaldav.lib import error
from minicaldav.lib.url import URL
from minicaldav.protocol import DAVMethod
from minicaldav.requests import BasicCredentials

HOME_SET = "http://localhost:8000/caldav/"


class TestListCalendars:
    def test_list(self, discovery_routes):
        discovery_routes[("PROPFIND", HOME_SET)] = response(body=CALENDARS_RESPONSE)
        io = make_io(discovery_routes)
        calendars = list_calendars(io, BASE_URL, BasicCredentials("user", "pass"))

        assert [c.display_name for c in calendars] == [
            "Calendar",
            "Birthdays",
            "Holidays",
        ]
        assert [c.url for c in calendars] == [
            "http://localhost:8000/caldav/ABC0815/",
            "http://localhost:8000/caldav/ABC0816/",
            "http://localhost:8000/caldav/holidays/",
        ]
        listing = io.requests[-1]
        assert listing.method == DAVMethod.PROPFIND
        assert listing.headers["Depth"] == "1"

    def test_privileges_and_subscriptions(self, discovery_routes):
        discovery_routes[("PROPFIND", HOME_SET)] = response(body=CALENDARS_RESPONSE)
        calendar, birthdays, holidays = list_calendars(
            make_io(discovery_routes), BASE_URL
        )
        assert calendar.writable
        assert calendar.color == "#0082c9"
        assert not birthdays.writable
        assert birthdays.color is None
        assert holidays.is_subscription
        assert not calendar.is_subscription

    def test_listing_at_base_url_without_home_set(self, discovery_routes):
        ## the base URL answers the principal PROPFIND first, then the listing
        discovery_routes[("PROPFIND", BASE_URL)] = [
            discovery_routes[("PROPFIND", BASE_URL)],
            response(body=CALENDARS_RESPONSE),
        ]
        discovery_routes[("PROPFIND", "http://localhost:8000/principals/users/1")] = (
            response(status=404)
        )
        calendars = list_calendars(make_io(discovery_routes), BASE_URL)
        assert len(calendars) == 3

    def test_listing_at_base_url_without_principal(self):
        ## principal lookup gets a 404, the base URL is listed instead
        io = make_io(
            {
                ("PROPFIND", BASE_URL): [
                    response(status=404),
                    response(body=CALENDARS_RESPONSE),
                ]
            }
        )
        calendars = list_calendars(io, BASE_URL)
        assert [c.display_name for c in calendars] == [
            "Calendar",
            "Birthdays",
            "Holidays",
        ]
        assert [r.url for r in io.requests] == [BASE_URL, BASE_URL]
        assert [r.headers["Depth"] for r in io.requests] == ["0", "1"]

    def test_non_calendar_collections_are_skipped(self, discovery_routes):
        discovery_routes[("PROPFIND", HOME_SET)] = response(body=CALENDARS_RESPONSE)
        calendars = list_calendars(make_io(discovery_routes), BASE_URL)
        assert "Inbox" not in [c.display_name for c in calendars]
        assert HOME_SET + "inbox/" not in [c.url for c in calendars]

    def test_fallback_to_calendar_query(self, discovery_routes):
        discovery_routes[("PROPFIND", HOME_SET)] = response(status=405)
        discovery_routes[("REPORT", BASE_URL)] = response(body=CALENDARS_RESPONSE)
        io = make_io(discovery_routes)
        calendars = list_calendars(io, BASE_URL)

        assert len(calendars) == 3
        report = io.requests[-1]
        assert report.method == DAVMethod.REPORT
        assert report.headers["Depth"] == "1"
        assert b"calendar-query" in report.body

    @pytest.mark.parametrize(
        "failure",
        [
            error.TransportError(HOME_SET, "timeout"),
            response(body=b"<not xml"),
        ],
    )
    def test_fallback_on_other_failures(self, discovery_routes, failure):
        discovery_routes[("PROPFIND", HOME_SET)] = failure
        discovery_routes[("REPORT", BASE_URL)] = response(body=CALENDARS_RESPONSE)
        assert len(list_calendars(make_io(discovery_routes), BASE_URL)) == 3

    def test_fallback_fails_too(self, discovery_routes):
        discovery_routes[("PROPFIND", HOME_SET)] = response(status=405)
        discovery_routes[("REPORT", BASE_URL)] = response(status=403)
        with pytest.raises(error.RequestFailed):
            list_calendars(make_io(discovery_routes), BASE_URL)

    def test_unjoinable_hrefs_are_skipped(self, discovery_routes):
        body = CALENDARS_RESPONSE.replace(
            b"/caldav/ABC0816/", b"http://localhost:eighty/caldav/ABC0816/"
        )
        discovery_routes[("PROPFIND", HOME_SET)] = response(body=body)
        calendars = list_calendars(make_io(discovery_routes), BASE_URL)
        assert [c.display_name for c in calendars] == ["Calendar", "Holidays"]


class TestCreateRemoveCalendar:
    def test_create(self, discovery_routes):
        new_url = HOME_SET + "work"
        discovery_routes[("MKCOL", new_url)] = response(status=201)
        io = make_io(discovery_routes)

        url = create_calendar(io, BASE_URL, "work", "Work", color="#ff0000")

        assert url == URL(new_url)
        mkcol = io.requests[-1]
        assert mkcol.method == DAVMethod.MKCOL
        root = etree.fromstring(mkcol.body)
        ns = {"D": "DAV:", "I": "http://apple.com/ns/ical/"}
        assert root.xpath("//D:displayname/text()", namespaces=ns) == ["Work"]
        assert root.xpath("//I:calendar-color/text()", namespaces=ns) == ["#ff0000"]

    def test_create_failed(self, discovery_routes):
        discovery_routes[("MKCOL", HOME_SET + "work")] = response(status=405)
        with pytest.raises(error.RequestFailed) as e:
            create_calendar(make_io(discovery_routes), BASE_URL, "work", "Work")
        assert e.value.status == 405

    def test_remove(self, discovery_routes):
        discovery_routes[("DELETE", HOME_SET + "work")] = response(status=204)
        io = make_io(discovery_routes)
        remove_calendar(io, BASE_URL, "work")
        assert io.requests[-1].method == DAVMethod.DELETE

    def test_remove_failed(self, discovery_routes):
        discovery_routes[("DELETE", HOME_SET + "work")] = response(status=404)
        with pytest.raises(error.RequestFailed):
            remove_calendar(make_io(discovery_routes), BASE_URL, "work")
