"""Tests for the default transport table and per-client overrides."""

from __future__ import annotations

from unittest.mock import MagicMock

import pydantic
import pytest

from wpapi.exceptions import ConfigurationError
from wpapi.transport import DEFAULT_TRANSPORT, VERBS, http, resolve_transport, validate_overrides
from wpapi.transport.table import TransportTable


class TestDefaultTransport:
    def test_has_all_verbs(self) -> None:
        for verb in VERBS:
            assert callable(DEFAULT_TRANSPORT[verb])

    def test_backed_by_http_module(self) -> None:
        assert DEFAULT_TRANSPORT.get is http.get
        assert DEFAULT_TRANSPORT["delete"] is http.delete

    @pytest.mark.parametrize("verb", VERBS)
    def test_assignment_fails(self, verb: str) -> None:
        original = DEFAULT_TRANSPORT[verb]
        with pytest.raises(pydantic.ValidationError):
            setattr(DEFAULT_TRANSPORT, verb, MagicMock())
        assert DEFAULT_TRANSPORT[verb] is original

    def test_unknown_verb_item(self) -> None:
        with pytest.raises(KeyError):
            DEFAULT_TRANSPORT["patch"]

    def test_requires_all_verbs(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            TransportTable(get=MagicMock())  # type: ignore[call-arg]


class TestValidateOverrides:
    def test_none(self) -> None:
        assert validate_overrides(None) == {}

    def test_returns_plain_copy(self) -> None:
        get = MagicMock()
        overrides = {"get": get}
        result = validate_overrides(overrides)
        assert result == {"get": get}
        assert result is not overrides

    def test_not_a_mapping(self) -> None:
        with pytest.raises(ConfigurationError, match="mapping"):
            validate_overrides([("get", MagicMock())])  # type: ignore[arg-type]

    def test_unknown_verb(self) -> None:
        with pytest.raises(ConfigurationError, match="patch"):
            validate_overrides({"patch": MagicMock()})

    def test_not_callable(self) -> None:
        with pytest.raises(ConfigurationError, match="callable"):
            validate_overrides({"put": 42})


class TestResolveTransport:
    def test_override_wins(self) -> None:
        get = MagicMock()
        assert resolve_transport("get", {"get": get}) is get

    def test_falls_back_per_verb(self) -> None:
        assert resolve_transport("put", {"get": MagicMock()}) is DEFAULT_TRANSPORT.put

    def test_no_overrides(self) -> None:
        assert resolve_transport("head") is DEFAULT_TRANSPORT.head
