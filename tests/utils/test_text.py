import pytest

from blogit.utils.text import parameterize, truncate


class TestParameterize:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Hello, World! Test", "hello-world-test"),
            ("  Leading and trailing  ", "leading-and-trailing"),
            ("Multiple---hyphens", "multiple-hyphens"),
            ("snake_case_title", "snake-case-title"),
            ("Ünïcödé Çharacters", "unicode-characters"),
            ("100% Pure", "100-pure"),
            ("!!!", ""),
        ],
    )
    def test_parameterize(self, text, expected):
        assert parameterize(text) == expected

    def test_custom_separator(self):
        assert parameterize("Hello World", separator="_") == "hello_world"


class TestTruncate:
    def test_short_text_is_unchanged(self):
        assert truncate("Once upon a time", 30) == "Once upon a time"

    def test_text_at_the_limit_is_unchanged(self):
        assert truncate("x" * 30, 30) == "x" * 30

    def test_long_text_is_cut_with_omission(self):
        assert truncate("Once upon a time in a world far far away", 17) == "Once upon a ti..."

    def test_custom_omission(self):
        assert truncate("Once upon a time in a world", 12, omission="~") == "Once upon a~"

    def test_cut_at_separator(self):
        text = "Once upon a time\nin a world far far away"
        assert truncate(text, 27, separator="\n") == "Once upon a time..."

    def test_cut_at_word_boundary(self):
        assert truncate("Once upon a time in a world", 17, separator=" ") == "Once upon a..."

    def test_separator_not_found(self):
        assert truncate("abcdefghijklmnop", 10, separator=" ") == "abcdefg..."

    def test_none_is_returned_as_is(self):
        assert truncate(None, 10) is None
