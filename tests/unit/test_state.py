import pytest
from dataclasses import FrozenInstanceError
from typing import List

from PIL import Image

from xwing_base.state import Selection, SelectionStore, derive_nameplate_mode
from xwing_base.types import ArcVariant, BaseSize, Faction, NameplateMode


@pytest.mark.parametrize(
    "pilot_name, initiative, expected",
    [
        ("Wedge", "3", NameplateMode.FULL),
        ("Wedge", "", NameplateMode.FULL),
        ("", "3", NameplateMode.INITIATIVE),
        ("   ", "3", NameplateMode.INITIATIVE),
        ("", "", NameplateMode.NONE),
        ("  ", " \t", NameplateMode.NONE),
    ],
)
def test_nameplate_mode_priority(
    pilot_name: str, initiative: str, expected: NameplateMode
) -> None:
    assert derive_nameplate_mode(pilot_name, initiative) is expected
    selection = Selection(pilot_name=pilot_name, initiative=initiative)
    assert selection.nameplate_mode is expected


def test_defaults() -> None:
    selection = SelectionStore().current
    assert selection.base_size is BaseSize.SMALL
    assert selection.faction is Faction.NONE
    assert selection.front_arc is ArcVariant.NONE
    assert selection.back_arc is ArcVariant.NONE
    assert selection.pilot_name == ""
    assert selection.initiative == ""
    assert selection.ship_icon is None


def test_selection_is_frozen() -> None:
    selection = Selection()
    with pytest.raises(FrozenInstanceError):
        selection.pilot_name = "Luke"  # type: ignore[misc]


def test_nameplate_mode_is_recomputed_not_stored() -> None:
    store = SelectionStore()
    store.update(pilot_name="Wedge", initiative="3")
    assert store.current.nameplate_mode is NameplateMode.FULL
    store.update(pilot_name="")
    assert store.current.nameplate_mode is NameplateMode.INITIATIVE
    assert "nameplate_mode" not in Selection.__dataclass_fields__


def test_update_swaps_snapshot_and_notifies() -> None:
    store = SelectionStore()
    seen: List[Selection] = []
    store.subscribe(seen.append)
    before = store.current
    after = store.update(base_size="large", faction="galactic-empire")
    assert before.base_size is BaseSize.SMALL
    assert after is store.current
    assert after.base_size is BaseSize.LARGE
    assert after.faction is Faction.GALACTIC_EMPIRE
    assert seen == [after]


def test_unsubscribe() -> None:
    store = SelectionStore()
    seen: List[Selection] = []
    unsubscribe = store.subscribe(seen.append)
    unsubscribe()
    store.update(pilot_name="Biggs")
    assert seen == []


@pytest.mark.parametrize(
    "changes",
    [
        {"base_size": "huge"},
        {"base_size": None},
        {"faction": "sith"},
        {"front_arc": "reararc"},
        {"back_arc": "bullseye"},
        {"ship_icon": b"not an image"},
        {"shields": 3},
    ],
)
def test_invalid_updates_raise(changes: dict) -> None:
    store = SelectionStore()
    with pytest.raises(ValueError):
        store.update(**changes)
    assert store.current == Selection()


def test_icon_is_replaced_not_mutated() -> None:
    store = SelectionStore()
    first = Image.new("RGBA", (10, 10), (255, 0, 0, 255))
    second = Image.new("RGBA", (20, 10), (0, 255, 0, 255))
    old = store.update(ship_icon=first)
    new = store.update(ship_icon=second)
    assert old.ship_icon is first
    assert new.ship_icon is second
    assert first.getpixel((0, 0)) == (255, 0, 0, 255)


def test_description_skips_empty_fields() -> None:
    selection = Selection(faction=Faction.RESISTANCE, initiative="4")
    description = selection.description
    assert description["base_size"] == BaseSize.SMALL
    assert description["faction"] == Faction.RESISTANCE
    assert description["initiative"] == "4"
    assert description["nameplate_mode"] == NameplateMode.INITIATIVE
    assert "pilot_name" not in description
    assert "front_arc" not in description
