import base64
from dataclasses import dataclass

from requests.auth import AuthBase


class Credentials(AuthBase):
    """
    Base class for the credentials passed to every operation.  Only the
    value of the Authorization header is derived from it, and the secret
    never shows up in repr() or log output.

    Being a requests AuthBase, an instance can also be handed to a plain
    requests call as ``auth=``.
    """

    def header_value(self) -> str:
        raise NotImplementedError

    def __call__(self, r):
        r.headers["Authorization"] = self.header_value()
        return r


@dataclass(frozen=True, repr=False)
class BasicCredentials(Credentials):
    username: str
    password: str

    def header_value(self) -> str:
        token = base64.b64encode(
            f"{self.username}:{self.password}".encode("utf-8")
        ).decode("ascii")
        return f"Basic {token}"

    def __repr__(self) -> str:
        return f"BasicCredentials(username={self.username!r}, password='***')"


@dataclass(frozen=True, repr=False)
class BearerCredentials(Credentials):
    token: str

    def header_value(self) -> str:
        return f"Bearer {self.token}"

    def __repr__(self) -> str:
        return "BearerCredentials(token='***')"
