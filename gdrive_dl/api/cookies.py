"""
A minimal cookie store that survives manually followed redirect chains.
"""

import logging
from typing import Iterable, Optional, Union

from rich.markup import escape

log = logging.getLogger(__name__)


class CookieStore:
    """
    Accumulates `Set-Cookie` values seen during a run and renders them as a
    single `Cookie` request header.

    Only the name/value pair of each cookie is kept; attributes such as
    `Path`, `Domain` or `Expires` are ignored and nothing ever expires.
    """

    def __init__(self) -> None:
        self._cookies: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._cookies)

    def __contains__(self, name: object) -> bool:
        return name in self._cookies

    def get(self, name: str) -> Optional[str]:
        return self._cookies.get(name)

    def record(self, set_cookie_headers: Union[None, str, Iterable[str]]) -> None:
        """
        Parses one or more `Set-Cookie` header values and upserts them.

        Args:
            set_cookie_headers: A single header value, an iterable of values,
                or None.
        """
        if not set_cookie_headers:
            return
        if isinstance(set_cookie_headers, str):
            set_cookie_headers = [set_cookie_headers]

        for header in set_cookie_headers:
            name_value = header.split(";", 1)[0]
            name, sep, value = name_value.partition("=")
            name = name.strip()
            if not sep or not name:
                log.debug(
                    f"Ignoring malformed Set-Cookie value: {escape(repr(header))}"
                )
                continue
            self._cookies[name] = value.strip()

    def to_header(self) -> str:
        """Renders all cookies as `name=value; name2=value2`."""
        return "; ".join(f"{name}={value}" for name, value in self._cookies.items())
