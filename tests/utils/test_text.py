"""Tests for text helpers."""

from flowtask.utils.text import capitalize_first, cut_spans, detect_urls, looks_like_address


class TestCapitalizeFirst:
    def test_only_first_character(self):
        assert capitalize_first("call mom about the iPhone") == "Call mom about the iPhone"

    def test_empty(self):
        assert capitalize_first("") == ""

    def test_leading_url_untouched(self):
        assert capitalize_first("https://example.com/a check") == "https://example.com/a check"
        assert capitalize_first("github.com review") == "github.com review"

    def test_leading_email_untouched(self):
        assert capitalize_first("bob@example.com reply") == "bob@example.com reply"


class TestCutSpans:
    def test_single_span(self):
        text = "call mom every day please"
        assert cut_spans(text, [(9, 18)]) == "call mom please"

    def test_multiple_spans_any_order(self):
        text = "every tuesday at 6pm call mom"
        assert cut_spans(text, [(0, 13), (14, 20)]) == "call mom"
        assert cut_spans(text, [(14, 20), (0, 13)]) == "call mom"

    def test_everything_removed(self):
        assert cut_spans("every day", [(0, 9)]) == ""

    def test_no_spans(self):
        assert cut_spans("  keep me ", []) == "keep me"


class TestUrls:
    def test_detect(self):
        found = detect_urls("see https://a.io/x and www.b.com or c.org")
        assert found == ["https://a.io/x", "www.b.com", "c.org"]

    def test_none(self):
        assert detect_urls("buy milk") == []

    def test_looks_like_address(self):
        assert looks_like_address("example.com")
        assert looks_like_address("me@example.com")
        assert not looks_like_address("hello")
