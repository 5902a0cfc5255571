"""Tests for the apicreator exception hierarchy."""

from __future__ import annotations

from apicreator.exceptions import ApiCreatorError, ConfigurationError, RemoteRejection


class TestHierarchy:
    def test_subclasses(self) -> None:
        assert issubclass(ConfigurationError, ApiCreatorError)
        assert issubclass(RemoteRejection, ApiCreatorError)

    def test_remote_rejection_keeps_payload(self) -> None:
        payload = {"message": "bad", "code": 7}
        exc = RemoteRejection(payload)
        assert exc.payload is payload
        assert str(exc) == '{"message":"bad","code":7}'

    def test_remote_rejection_unserialisable_payload(self) -> None:
        payload = {"when": object}
        assert str(RemoteRejection(payload)) == repr(payload)
