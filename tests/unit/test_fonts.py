import logging
from pathlib import Path

import pytest
from PIL import ImageDraw, Image

from xwing_base.fonts import FontSet


def test_sizes_are_rounded_and_cached() -> None:
    fonts = FontSet()
    assert fonts.get(20.4) is fonts.get(19.6)
    assert fonts.get(0.2) is fonts.get(1)


def test_missing_override_falls_back_to_default(tmp_path: Path) -> None:
    fonts = FontSet(str(tmp_path / "nope.ttf"), str(tmp_path / "nope-bold.ttf"))
    font = fonts.get(24, bold=True)
    draw = ImageDraw.Draw(Image.new("L", (100, 40)))
    assert draw.textbbox((0, 0), "8", font=font)[2] > 0


def test_unreadable_font_falls_back_with_one_warning(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    broken = tmp_path / "broken.ttf"
    broken.write_bytes(b"not a font")
    fonts = FontSet(str(broken), str(broken))

    with caplog.at_level(logging.WARNING, logger="xwing_base.fonts"):
        small = fonts.get(12, bold=True)
        large = fonts.get(30, bold=True)
        regular = fonts.get(30)

    assert small is not large
    assert regular is not None
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert str(broken) in warnings[0].getMessage()
