"""
Drive HTTP Layer.

This package handles all communication with the public Drive endpoints:
the cookie store and the redirect-following request client.
"""

from .client import LOGIN_MARKER, USER_AGENT, DriveClient
from .cookies import CookieStore

__all__ = ["CookieStore", "DriveClient", "LOGIN_MARKER", "USER_AGENT"]
