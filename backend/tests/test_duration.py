"""
Duration string parsing.

Tests:
  - test_hours_and_minutes        : "{h}h {m}m" -> h*60 + m
  - test_single_term              : hours only, minutes only
  - test_empty_markers            : None, "" and "-" are zero
  - test_garbage_degrades_to_zero : unreadable text never raises
"""

from __future__ import annotations

import pytest

from facility_ops.services.duration import parse_duration


class TestParseDuration:
    @pytest.mark.parametrize(
        ("hours", "minutes"),
        [(0, 0), (9, 18), (8, 0), (12, 59), (0, 45), (24, 5)],
    )
    def test_hours_and_minutes(self, hours: int, minutes: int) -> None:
        assert parse_duration(f"{hours}h {minutes}m") == hours * 60 + minutes

    def test_single_term(self) -> None:
        assert parse_duration("45m") == 45
        assert parse_duration("3h") == 180

    @pytest.mark.parametrize("value", [None, "", "-"])
    def test_empty_markers(self, value) -> None:
        assert parse_duration(value) == 0

    @pytest.mark.parametrize("value", ["n/a", "about nine", "h m", "--"])
    def test_garbage_degrades_to_zero(self, value: str) -> None:
        assert parse_duration(value) == 0

    def test_unspaced_terms(self) -> None:
        assert parse_duration("9h18m") == 558
