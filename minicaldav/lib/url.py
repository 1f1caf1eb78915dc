#!/usr/bin/env python
import sys
import urllib.parse
from typing import Any
from typing import cast
from typing import Optional
from typing import Union
from urllib.parse import ParseResult
from urllib.parse import quote
from urllib.parse import SplitResult
from urllib.parse import unquote
from urllib.parse import urljoin
from urllib.parse import urlparse
from urllib.parse import urlunparse

from minicaldav.lib.error import UrlJoinError
from minicaldav.lib.python_utilities import to_normal_str
from minicaldav.lib.python_utilities import to_unicode

if sys.version_info < (3, 11):
    from typing_extensions import Self
else:
    from typing import Self


class URL:
    """
    This class is for wrapping URLs into objects.  All functions in
    the library that accept URLs can be fed either with a URL object,
    a string or a urlparse.ParseResult object.

    Hrefs found in server responses may be one out of three:

    1) a path relative to the collection, i.e. "work/" below
    "http://cal.example.com/caldav/someuser/".

    2) an absolute path, i.e. "/caldav/someuser/work/"

    3) a fully qualified URL, i.e. "https://cal.example.com/caldav/someuser/work/".

    ``join`` turns any of those into a fully qualified URL, given the
    URL the request was sent to.
    """

    def __init__(self, url: Union[str, ParseResult, SplitResult]) -> None:
        if isinstance(url, ParseResult) or isinstance(url, SplitResult):
            self.url_parsed: Optional[Union[ParseResult, SplitResult]] = url
            self.url_raw = None
        else:
            self.url_raw = url
            self.url_parsed = None

    def __bool__(self) -> bool:
        if self.url_raw or self.url_parsed:
            return True
        else:
            return False

    def __ne__(self, other: object) -> bool:
        return not self == other

    def __eq__(self, other: object) -> bool:
        if str(self) == str(other):
            return True
        # The URLs could have insignificant differences
        me = self.canonical()
        if hasattr(other, "canonical"):
            other = other.canonical()
        return str(me) == str(other)

    def __hash__(self) -> int:
        return hash(str(self))

    @classmethod
    def objectify(cls, url: Union[Self, str, ParseResult, SplitResult]) -> "URL":
        """Returns url if it is a URL object already, else wraps it"""
        if url is None or isinstance(url, URL):
            return url
        else:
            return URL(url)

    # To deal with all kind of methods/properties in the ParseResult
    # class
    def __getattr__(self, attr: str):
        if "url_parsed" not in vars(self):
            raise AttributeError
        if self.url_parsed is None:
            self.url_parsed = cast(urllib.parse.ParseResult, urlparse(self.url_raw))
        if hasattr(self.url_parsed, attr):
            return getattr(self.url_parsed, attr)
        else:
            return getattr(self.__unicode__(), attr)

    # returns the url in text format
    def __str__(self) -> str:
        return to_normal_str(self.__unicode__())

    # returns the url in text format
    def __unicode__(self) -> str:
        if self.url_raw is None:
            if self.url_parsed is None:
                raise ValueError("Unexpected value None for self.url_parsed")

            self.url_raw = self.url_parsed.geturl()
        return to_unicode(self.url_raw)

    def __repr__(self) -> str:
        return "URL(%s)" % str(self)

    def is_auth(self) -> bool:
        return self.username is not None

    def unauth(self) -> "URL":
        if not self.is_auth():
            return self
        return URL.objectify(
            ParseResult(
                self.scheme,
                "%s:%s"
                % (self.hostname, self.port or {"https": 443, "http": 80}[self.scheme]),
                self.path.replace("//", "/"),
                self.params,
                self.query,
                self.fragment,
            )
        )

    def canonical(self) -> "URL":
        """
        a canonical URL ... remove authentication details, make sure there
        are no double slashes, and to make sure the URL is always the same,
        run it through the urlparser, and make sure path is properly quoted
        """
        url = self.unauth()

        arr = list(cast(urllib.parse.ParseResult, urlparse(str(url))))
        ## quoting path and removing double slashes
        arr[2] = quote(unquote(url.path.replace("//", "/")))
        ## sensible defaults
        if not arr[0]:
            arr[0] = "https"
        if arr[1] and ":" not in arr[1]:
            if arr[0] == "https":
                portpart = ":443"
            elif arr[0] == "http":
                portpart = ":80"
            else:
                portpart = ""
            arr[1] += portpart

        return URL(urlunparse(arr))

    def join(self, path: Any) -> "URL":
        """
        assumes this object is the base URL or base path.  A path that
        carries its own scheme and host is returned as it is, even when
        it points to another server.  Anything else is resolved against
        self following RFC 3986, so ``.`` and ``..`` segments are
        collapsed and a relative path replaces the last segment of a
        base that has no trailing slash.  UrlJoinError is raised only
        when the path can't be parsed at all.
        """
        pathAsString = str(path) if path is not None else ""
        if not path or not pathAsString:
            return self
        try:
            parsed = urlparse(pathAsString)
            ## urllib raises ValueError on i.e. non-numeric ports
            parsed.port
            if parsed.scheme and parsed.netloc:
                return URL(parsed)
            return URL(urljoin(str(self), pathAsString))
        except ValueError as e:
            raise UrlJoinError(
                url=str(self),
                reason="%s can't be joined with %s: %s" % (self, pathAsString, e),
            ) from e

    def with_query(self, query: str) -> "URL":
        """Returns a copy of the URL with the query string replaced"""
        parsed = urlparse(str(self))
        return URL(parsed._replace(query=query))
