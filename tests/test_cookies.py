"""
Tests for the run-wide cookie store.
"""

from gdrive_dl.api.cookies import CookieStore


class TestCookieStore:
    def test_empty_store_renders_nothing(self):
        store = CookieStore()
        assert store.to_header() == ""
        assert len(store) == 0

    def test_records_name_and_value_only(self):
        store = CookieStore()
        store.record("NID=511=abc; expires=Sat, 01-Jan-2050 00:00:00 GMT; path=/; HttpOnly")
        assert store.get("NID") == "511=abc"
        assert store.to_header() == "NID=511=abc"

    def test_records_many_headers_in_order(self):
        store = CookieStore()
        store.record(["a=1; Path=/", "b=2"])
        store.record("c=3")
        assert store.to_header() == "a=1; b=2; c=3"

    def test_later_value_replaces_earlier(self):
        store = CookieStore()
        store.record(["a=1", "b=2"])
        store.record("a=9")
        assert store.to_header() == "a=9; b=2"

    def test_malformed_values_are_ignored(self):
        store = CookieStore()
        store.record(["no-equals-sign", "=orphan", "ok=1"])
        assert store.to_header() == "ok=1"
        assert "ok" in store
        assert "no-equals-sign" not in store

    def test_none_is_ignored(self):
        store = CookieStore()
        store.record(None)
        assert len(store) == 0

    def test_empty_value_is_kept(self):
        store = CookieStore()
        store.record("blank=; Max-Age=0")
        assert store.get("blank") == ""
