from logweave.alignment import LeftAlignWriter, MaxWidthWriter, RightAlignWriter
from logweave.style import Color, Style, Writer


class Recorder(Writer):
    def __init__(self):
        self.events = []
        self.flushed = 0

    def write(self, data):
        self.events.append(bytes(data))

    def flush(self):
        self.flushed += 1

    def set_style(self, style):
        self.events.append(style)

    @property
    def data(self):
        return b"".join(e for e in self.events if isinstance(e, bytes))


def test_max_width_truncates():
    rec = Recorder()
    w = MaxWidthWriter(rec, 3)
    w.write(b"hello")
    w.write(b"more")
    assert rec.data == b"hello"[:3]
    assert w.remaining == 0


def test_max_width_across_writes():
    rec = Recorder()
    w = MaxWidthWriter(rec, 4)
    w.write(b"ab")
    w.write(b"cdef")
    assert rec.data == b"abcd"


def test_max_width_counts_characters_not_bytes():
    rec = Recorder()
    text = "héllo"
    w = MaxWidthWriter(rec, 2)
    w.write(text.encode("utf-8"))
    assert rec.data.decode("utf-8") == text[:2]


def test_max_width_passes_style_and_flush():
    rec = Recorder()
    w = MaxWidthWriter(rec, 1)
    style = Style(text=Color.RED)
    w.set_style(style)
    w.flush()
    assert rec.events == [style]
    assert rec.flushed == 1


def test_left_align_pads():
    rec = Recorder()
    w = LeftAlignWriter(rec, 5, "~")
    w.write(b"foo")
    w.finish()
    assert rec.data == b"foo~~"


def test_left_align_no_padding_when_long():
    rec = Recorder()
    w = LeftAlignWriter(rec, 2, "~")
    w.write(b"foobar!")
    w.finish()
    assert rec.data == b"foobar!"


def test_left_align_with_max_width():
    rec = Recorder()
    w = LeftAlignWriter(MaxWidthWriter(rec, 6), 5, "~")
    w.write(b"foobar!")
    w.finish()
    assert rec.data == b"foobar"


def test_left_align_multibyte_fill():
    rec = Recorder()
    w = LeftAlignWriter(rec, 3, "é")
    w.write(b"a")
    w.finish()
    assert rec.data.decode("utf-8") == "a" + "é" * 2


def test_right_align_pads_before():
    rec = Recorder()
    w = RightAlignWriter(rec, 5, "~")
    w.write(b"foo")
    assert rec.events == []
    w.finish()
    assert rec.data == b"~~foo"


def test_right_align_with_max_width():
    rec = Recorder()
    w = RightAlignWriter(MaxWidthWriter(rec, 6), 5, "~")
    w.write(b"foobar!")
    w.finish()
    assert rec.data == b"foobar"


def test_right_align_replays_styles_in_order():
    rec = Recorder()
    red = Style(text=Color.RED)
    plain = Style()
    w = RightAlignWriter(rec, 4, "-")
    w.set_style(red)
    w.write(b"a")
    w.write(b"b")
    w.set_style(plain)
    w.finish()
    assert rec.events == [b"--", red, b"ab", plain]


def test_output_length_invariant():
    for text in ["", "x", "abcdef", "abcdefghij"]:
        rec = Recorder()
        w = LeftAlignWriter(MaxWidthWriter(rec, 6), 4)
        w.write(text.encode())
        w.finish()
        assert 4 <= len(rec.data) <= 6
        assert rec.data.startswith(text.encode()[:6])