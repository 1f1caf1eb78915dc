import datetime

import pytest
from lxml import etree

from minicaldav.elements import cdav
from minicaldav.elements import dav
from minicaldav.elements.cdav import _to_utc_date_string
from minicaldav.elements.cdav import CalendarQuery

SOMEWHERE_REMOTE = datetime.timezone(datetime.timedelta(hours=-2))  # no DST


def test_element():
    cq = CalendarQuery()
    assert str(cq).startswith("<?xml")
    assert "calendar-query" in str(cq)


def test_composition():
    propfind = dav.Propfind() + (dav.Prop() + [dav.DisplayName(), dav.GetEtag()])
    root = propfind.xmlelement()
    assert root.tag == "{DAV:}propfind"
    assert [etree.QName(c).localname for c in root[0]] == ["displayname", "getetag"]


def test_named_element_needs_name():
    with pytest.raises(ValueError):
        cdav.CompFilter().xmlelement()
    assert cdav.CompFilter("VEVENT").xmlelement().get("name") == "VEVENT"


def test_to_utc_date_string_date():
    input = datetime.date(2019, 5, 14)
    res = _to_utc_date_string(input)
    assert res == "20190514T000000Z"


def test_to_utc_date_string_utc():
    input = datetime.datetime(2019, 5, 14, 21, 10, 23, 23, tzinfo=datetime.timezone.utc)
    res = _to_utc_date_string(input.astimezone())
    assert res == "20190514T211023Z"


def test_to_utc_date_string_dt_with_tzinfo():
    input = datetime.datetime(2019, 5, 14, 21, 10, 23, 23, tzinfo=SOMEWHERE_REMOTE)
    res = _to_utc_date_string(input)
    assert res == "20190514T231023Z"


def test_to_utc_date_string_naive_dt():
    input = datetime.datetime(2019, 5, 14, 21, 10, 23, 23)
    res = _to_utc_date_string(input)
    exp = input.astimezone(datetime.timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    assert res == exp


def test_to_utc_date_string_preformatted():
    assert _to_utc_date_string("20190514T000000Z") == "20190514T000000Z"


def test_time_range():
    tr = cdav.TimeRange(
        datetime.datetime(2019, 5, 14, tzinfo=datetime.timezone.utc), "20190515T000000Z"
    ).xmlelement()
    assert tr.get("start") == "20190514T000000Z"
    assert tr.get("end") == "20190515T000000Z"
    assert cdav.Expand().xmlelement().get("start") is None
