from __future__ import annotations

from rich.color import Color, ColorType

from termdeck.themes import find_theme
from termdeck.tui.widgets import SubTabLabel, themed_ansi


def test_standard_colours_come_from_the_palette() -> None:
    theme = find_theme("Nord")
    assert theme is not None

    text = themed_ansi("\x1b[31mred\x1b[0m \x1b[101mbright\x1b[0m", theme)

    red, bright = (span.style for span in text.spans)
    assert text.plain == "red bright"
    assert red.color.triplet == Color.parse(theme.palette[1]).triplet
    assert bright.bgcolor.triplet == Color.parse(theme.palette[9]).triplet


def test_indexed_and_true_colours() -> None:
    theme = find_theme("Dracula")
    assert theme is not None

    text = themed_ansi("\x1b[38;5;4mlow\x1b[38;5;200mhigh\x1b[38;2;1;2;3mrgb", theme)

    low, high, rgb = (span.style.color for span in text.spans)
    assert low.triplet == Color.parse(theme.palette[4]).triplet
    assert high.type is ColorType.EIGHT_BIT and high.number == 200
    assert rgb.type is ColorType.TRUECOLOR and tuple(rgb.triplet) == (1, 2, 3)


def test_without_a_theme_ansi_is_left_alone() -> None:
    text = themed_ansi("\x1b[32mok\x1b[0m", None)

    assert text.spans[0].style.color.number == 2


def test_tab_label_ends_with_close_glyph() -> None:
    assert SubTabLabel.format_label("build") == " build × "
