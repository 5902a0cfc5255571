"""Tests for apicreator.headers.HeaderStore."""

from __future__ import annotations

import pytest

from apicreator.headers import DEFAULT_HEADERS, HeaderStore


class TestDefaults:
    def test_with_defaults(self) -> None:
        store = HeaderStore.with_defaults()
        assert dict(store.items()) == DEFAULT_HEADERS

    def test_overrides_replace_by_case_insensitive_name(self) -> None:
        store = HeaderStore.with_defaults({"content-type": "text/plain", "x-token": "1"})
        assert dict(store.items()) == {
            "Accept": "application/json",
            "Content-Type": "text/plain",
            "x-token": "1",
        }


class TestAccess:
    def test_get_is_case_insensitive(self) -> None:
        store = HeaderStore({"X-Access-Token": "123"})
        assert store.get("x-access-token") == "123"
        assert store.get("X-ACCESS-TOKEN") == "123"

    def test_get_absent_returns_none(self) -> None:
        assert HeaderStore().get("missing") is None

    def test_get_absent_with_default(self) -> None:
        assert HeaderStore().get("missing", "") == ""

    def test_add_keeps_first_casing(self) -> None:
        store = HeaderStore({"Content-Type": "application/json"})
        store.add("content-type", "text/plain")
        assert list(store) == ["Content-Type"]
        assert store["CONTENT-TYPE"] == "text/plain"

    def test_add_new_uses_given_casing(self) -> None:
        store = HeaderStore()
        store.add("x-Custom", "v")
        assert list(store) == ["x-Custom"]

    def test_remove_is_case_insensitive(self) -> None:
        store = HeaderStore.with_defaults()
        store.remove("content-type")
        assert "Content-Type" not in store
        assert list(store) == ["Accept"]

    def test_remove_absent_is_noop(self) -> None:
        store = HeaderStore.with_defaults()
        store.remove("nope")
        assert len(store) == 2

    def test_del_absent_raises(self) -> None:
        with pytest.raises(KeyError):
            del HeaderStore()["nope"]

    def test_contains_non_string(self) -> None:
        assert 1 not in HeaderStore.with_defaults()


class TestMerging:
    def test_merged_returns_new_store(self) -> None:
        store = HeaderStore.with_defaults()
        merged = store.merged({"accept": "text/html", "x-extra": "1"})
        assert merged.get("Accept") == "text/html"
        assert merged.get("x-extra") == "1"
        assert store.get("accept") == "application/json"
        assert "x-extra" not in store

    def test_merged_with_none(self) -> None:
        store = HeaderStore.with_defaults()
        assert dict(store.merged(None).items()) == dict(store.items())

    def test_copy_is_independent(self) -> None:
        store = HeaderStore.with_defaults()
        copy = store.copy()
        copy.add("x", "1")
        assert "x" not in store

    def test_to_dict_drops_empty_values(self) -> None:
        store = HeaderStore({"Accept": "application/json", "x-a": None, "x-b": ""})
        assert store.to_dict() == {"Accept": "application/json"}
