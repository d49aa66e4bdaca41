import pytest

from xwing_base.layout import LAYOUT_PROFILES, Anchor, layout_for
from xwing_base.types import BaseSize


def test_exactly_three_profiles() -> None:
    assert set(LAYOUT_PROFILES) == set(BaseSize)


@pytest.mark.parametrize("size", list(BaseSize))
def test_profiles_are_fractions(size: BaseSize) -> None:
    profile = LAYOUT_PROFILES[size]
    for anchor in (profile.name_anchor, profile.initiative_anchor, profile.icon_anchor):
        assert 0.0 < anchor.x < 1.0
        assert 0.0 < anchor.y < 1.0
    for fraction in (
        profile.name_font_size,
        profile.initiative_font_size,
        profile.icon_max_size,
    ):
        assert 0.0 < fraction < 0.2


def test_small_profile_values() -> None:
    profile = layout_for(BaseSize.SMALL)
    assert profile.name_anchor == Anchor(0.55, 0.78)
    assert profile.name_font_size == 0.038
    assert profile.initiative_anchor == Anchor(0.12, 0.78)
    assert profile.initiative_font_size == 0.08


@pytest.mark.parametrize("size", [None, "huge"])
def test_unknown_size_falls_back_to_small(size: object) -> None:
    assert layout_for(size) is LAYOUT_PROFILES[BaseSize.SMALL]  # type: ignore[arg-type]


def test_anchor_scales_linearly() -> None:
    anchor = Anchor(0.25, 0.5)
    assert anchor.to_pixels(400, 200) == (100.0, 100.0)
    assert anchor.to_pixels(800, 400) == (200.0, 200.0)
