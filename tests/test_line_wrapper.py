"""Tests for the greedy two-line caption wrapper (caption_chunker.core.wrap_lines).

RULES:
- Lines never exceed the limit unless a single word does
- At most two lines; overflow is dropped from the display hint only
"""

import pytest

from caption_chunker import wrap_lines


class TestWrapLines:
    def test_short_text_is_single_line(self):
        assert wrap_lines("Hello world", 42) == ["Hello world"]

    def test_text_at_limit_is_single_line(self):
        text = "a" * 42
        assert wrap_lines(text, 42) == [text]

    def test_wraps_greedily(self):
        assert wrap_lines("one two three four", 9) == ["one two", "three"]

    def test_third_line_dropped(self):
        text = " ".join(["abcdefghi"] * 9)
        lines = wrap_lines(text, 42)

        assert len(text) == 89
        assert len(lines) == 2
        assert all(len(line) <= 42 for line in lines)
        assert lines[0] == " ".join(["abcdefghi"] * 4)

    def test_overlong_word_alone_on_line(self):
        long_word = "x" * 50
        assert wrap_lines(long_word, 42) == [long_word]

    def test_overlong_word_after_short_word(self):
        long_word = "x" * 50
        assert wrap_lines("hi " + long_word, 42) == ["hi", long_word]

    @pytest.mark.parametrize("limit", [5, 10, 20, 42])
    def test_never_empty(self, limit):
        assert wrap_lines("some caption text for wrapping here", limit)

    def test_words_never_split(self):
        text = "caption chunking keeps words whole always"
        for line in wrap_lines(text, 12):
            for word in line.split():
                assert word in text.split()
