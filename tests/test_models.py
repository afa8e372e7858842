"""Tests for itemrest.models -- keys, items, and profile configuration."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from itemrest.models import (
    AuthConfig,
    ClientApiOptions,
    ComKey,
    Item,
    LocKey,
    LocKeyArray,
    PriKey,
    Profile,
)


class TestKeys:
    def test_pri_key_dump_omits_kind(self) -> None:
        assert PriKey(kt="order", pk=1).model_dump() == {"kt": "order", "pk": 1}

    def test_keys_are_frozen(self) -> None:
        key = PriKey(kt="order", pk=1)
        with pytest.raises(ValidationError):
            key.pk = 2  # type: ignore[misc]

    def test_keys_are_hashable_and_comparable(self) -> None:
        assert LocKey(kt="order", lk=1) == LocKey(kt="order", lk=1)
        assert len({LocKey(kt="order", lk=1), LocKey(kt="order", lk=1)}) == 1

    def test_string_identifiers_kept(self) -> None:
        assert LocKey(kt="order", lk="abc").lk == "abc"

    def test_com_key_accepts_list(self) -> None:
        key = ComKey(kt="orderPhase", pk=3, loc=[{"kt": "order", "lk": 1}])
        assert isinstance(key.loc, LocKeyArray)
        assert key.loc.key_types() == ["order"]

    def test_com_key_dumps_loc_as_list(self) -> None:
        key = ComKey(kt="orderPhase", pk=3, loc=LocKeyArray.of(LocKey(kt="order", lk=1)))
        assert key.model_dump() == {
            "kt": "orderPhase",
            "pk": 3,
            "loc": [{"kt": "order", "lk": 1}],
        }

    def test_loc_key_array_of(self) -> None:
        chain = LocKeyArray.of(LocKey(kt="order", lk=1), LocKey(kt="orderPhase", lk=2))
        assert len(chain) == 2
        assert chain.locs[0].kt == "order"


class TestItem:
    def test_composite_key_detected(self) -> None:
        item = Item.model_validate(
            {"key": {"kt": "orderPhase", "pk": 3, "loc": [{"kt": "order", "lk": 1}]}}
        )
        assert isinstance(item.key, ComKey)
        assert item.key.loc.locs[0] == LocKey(kt="order", lk=1)

    def test_primary_key_detected(self) -> None:
        item = Item.model_validate({"key": {"kt": "order", "pk": 1}, "data": {"total": 10}})
        assert isinstance(item.key, PriKey)
        assert item.data == {"total": 10}

    def test_null_loc_is_primary_key(self) -> None:
        item = Item.model_validate({"key": {"kt": "order", "pk": 1, "loc": None}})
        assert isinstance(item.key, PriKey)
        assert item.key.pk == 1

    def test_events_parsed(self) -> None:
        item = Item.model_validate(
            {"key": {"kt": "order", "pk": 1}, "events": {"created": {"at": "2024-03-01T12:00:00Z"}}}
        )
        assert item.events.created.at == datetime(2024, 3, 1, 12, tzinfo=timezone.utc)
        assert item.events.deleted.at is None

    def test_extra_fields_preserved(self) -> None:
        item = Item.model_validate({"key": {"kt": "order", "pk": 1}, "status": "open"})
        assert item.model_extra == {"status": "open"}
        assert item.model_dump(mode="json")["status"] == "open"

    def test_missing_key_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Item.model_validate({"data": {}})


class TestConfigModels:
    def test_client_options_defaults(self) -> None:
        options = ClientApiOptions()
        assert options.read_authenticated and options.all_authenticated
        assert options.write_authenticated
        assert options.default_params == {}

    def test_auth_type_validated(self) -> None:
        with pytest.raises(ValidationError):
            AuthConfig(type="oauth2")  # type: ignore[arg-type]

    def test_profile_round_trip(self) -> None:
        profile = Profile(
            name="prod",
            base_url="https://api.example.com",
            auth=AuthConfig(type="bearer", source="env:TOKEN"),
            headers={"X-Tenant": "acme"},
        )
        restored = Profile.model_validate(profile.model_dump(mode="json"))
        assert restored == profile
        assert restored.request.timeout == 30
