"""Basic Auth — pure parsing and matching of HTTP Basic credentials.

Invariants:
    - parse_basic_authorization never raises; every malformed header becomes AuthError
    - BasicCredentials.check compares user and password both, every time, so a wrong
      user and a wrong password are indistinguishable to the caller
    - No IO, no request objects: the auth gate adapts this to Starlette

Design Decisions:
    - Strict base64 (validate=True): stray characters are a decode failure, not ignored
    - secrets.compare_digest on bytes: equal-length-independent timing comes for free
"""

import base64
import binascii
import secrets
from dataclasses import dataclass

from capture.core.errors import AuthError


@dataclass(frozen=True)
class BasicCredentials:
    """The single configured user/password pair. Read-only, shared by all requests."""
    username: str
    password: str

    def check(self, username: str, password: str) -> None:
        user_ok = secrets.compare_digest(
            username.encode("utf-8"), self.username.encode("utf-8"),
        )
        pass_ok = secrets.compare_digest(
            password.encode("utf-8"), self.password.encode("utf-8"),
        )
        if not (user_ok and pass_ok):
            raise AuthError("credential mismatch")


def parse_basic_authorization(header: str | None) -> tuple[str, str]:
    """Split 'Basic <base64(user:pass)>' into (user, pass)."""
    parts = (header or "").split(" ", 1)
    if len(parts) != 2 or parts[0] != "Basic":
        raise AuthError("missing or non-Basic authorization header")
    try:
        decoded = base64.b64decode(parts[1], validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise AuthError("undecodable credentials") from e
    user, sep, password = decoded.partition(":")
    if not sep:
        raise AuthError("credentials missing ':' separator")
    return user, password
