"""Tests for the standard filter set."""
from __future__ import annotations

from typing import List

import pytest

from mason.core.exceptions import InvalidFilterArgumentError, RequestStateError
from mason.core.filters.base import compose
from mason.core.filters.standard import (
    capture,
    compress_space,
    defer,
    html_escape,
    html_para,
    no_blank_lines,
    repeat,
    standard_registry,
    trim,
    uri_escape,
)


class TestSimpleStandardFilters:
    def test_trim(self) -> None:
        assert trim()("  \n hello world \t\n") == "hello world"

    def test_compress_space(self) -> None:
        assert compress_space()("a   b\n\n c\t d") == "a b c d"

    def test_no_blank_lines(self) -> None:
        text = "one\n\n   \ntwo\n\t\nthree\n"
        assert no_blank_lines()(text) == "one\ntwo\nthree\n"

    def test_no_blank_lines_keeps_indentation(self) -> None:
        assert no_blank_lines()("a\n\n  b\n") == "a\n  b\n"

    def test_html_escape(self) -> None:
        assert html_escape()('<a href="x">&\'</a>') == "&lt;a href=&quot;x&quot;&gt;&amp;&#x27;&lt;/a&gt;"

    def test_uri_escape(self) -> None:
        assert uri_escape()("a b/c?d=é") == "a%20b%2Fc%3Fd%3D%C3%A9"

    def test_html_para(self) -> None:
        result = html_para()("first para\nstill first\n\n\nsecond")
        assert result == "<p>\nfirst para\nstill first\n</p>\n\n<p>\nsecond\n</p>\n"


class TestDynamicStandardFilters:
    def test_repeat_concatenates(self) -> None:
        assert repeat(3)("ab") == "ababab"

    def test_repeat_zero_never_renders(self) -> None:
        calls: List[int] = []
        assert compose([repeat(0)], lambda: calls.append(1) or "x")() == ""
        assert calls == []

    def test_capture_to_list_outputs_nothing(self) -> None:
        sink: List[str] = []
        assert compose([capture(sink), trim()], "  kept  ")() == ""
        assert sink == ["kept"]

    def test_capture_to_callable(self) -> None:
        seen: List[str] = []
        capture(seen.append)("text")
        assert seen == ["text"]

    def test_defer_requires_active_request(self) -> None:
        with pytest.raises(RequestStateError):
            defer()("late")


class TestStandardRegistry:
    def test_standard_names(self) -> None:
        names = standard_registry.list_filters()
        for name in ["Cache", "Capture", "CompressSpace", "Defer", "H", "HTMLPara",
                     "NoBlankLines", "Repeat", "Trim", "U"]:
            assert name in names

    def test_pipe_of_standard_filters(self) -> None:
        filters = standard_registry.resolve_pipe("H,Trim")
        assert compose(filters, "  <b>  ")() == "&lt;b&gt;"

    @pytest.mark.parametrize("name", ["Repeat", "Capture", "Cache"])
    def test_argument_filters_are_block_only(self, name: str) -> None:
        with pytest.raises(InvalidFilterArgumentError):
            standard_registry.resolve_pipe(name)
