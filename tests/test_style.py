import pytest

from logweave.style import Color, Style, Writer


class Capture(Writer):
    def __init__(self):
        self.data = bytearray()

    def write(self, data):
        self.data.extend(data)


def test_writer_is_abstract():
    with pytest.raises(TypeError):
        Writer()


def test_default_set_style_and_flush_emit_nothing():
    w = Capture()
    w.write(b"normal ")
    w.set_style(Style(text=Color.RED, background=Color.BLUE, intense=True))
    w.write(b"styled")
    w.flush()
    assert bytes(w.data) == b"normal styled"


def test_style_defaults_are_unset():
    style = Style()
    assert style.text is None
    assert style.background is None
    assert style.intense is None


def test_style_equality_and_hash():
    a = Style(text=Color.GREEN)
    b = Style(text=Color.GREEN)
    assert a == b
    assert len({a, b, Style()}) == 2
    assert a != Style(text=Color.GREEN, intense=False)


def test_colors_cover_eight_values_in_order():
    assert [Style(text=c).text.value for c in Color] == list(range(8))
    assert Style(background=Color.BLACK).background.value < Style(background=Color.WHITE).background.value