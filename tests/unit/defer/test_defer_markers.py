"""Tests for distinct marker generation."""
from __future__ import annotations

import re

import pytest

from mason.core.defer.markers import MarkerGenerator


class TestMarkerGenerator:
    def test_markers_are_distinct(self) -> None:
        gen = MarkerGenerator()
        markers = [gen.next_distinct_string() for _ in range(200)]
        assert len(set(markers)) == 200

    def test_no_marker_is_substring_of_another(self) -> None:
        gen = MarkerGenerator(salt="s")
        markers = [gen.next_distinct_string() for _ in range(120)]
        for a in markers:
            for b in markers:
                if a != b:
                    assert a not in b

    def test_markers_contain_no_regex_metacharacters(self) -> None:
        gen = MarkerGenerator()
        marker = gen.next_distinct_string()
        assert re.fullmatch(r"[A-Za-z0-9_]+", marker)
        assert re.escape(marker) == marker

    def test_format(self) -> None:
        gen = MarkerGenerator(prefix="__D_", suffix="__", salt="abc")
        assert gen.next_distinct_string() == "__D_abc_1__"
        assert gen.next_distinct_string() == "__D_abc_2__"

    def test_generators_use_different_salts(self) -> None:
        assert MarkerGenerator().salt != MarkerGenerator().salt

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"prefix": "a.b"},
            {"prefix": ""},
            {"suffix": ""},
            {"suffix": "9x"},
            {"salt": "with space"},
        ],
    )
    def test_unsafe_settings_are_rejected(self, kwargs) -> None:
        with pytest.raises(ValueError):
            MarkerGenerator(**kwargs)
