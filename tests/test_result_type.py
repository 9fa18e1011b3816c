"""Tests for the Result type and error codes."""

import inspect
from dataclasses import FrozenInstanceError

import pytest

from domain.models import PlayerStats
from services import error_codes
from services.result import Result


class TestResultCreation:
    """Tests for ok / fail constructors."""

    def test_ok_with_value(self):
        """Result.ok(value) carries the value and no error."""
        stats = PlayerStats(player_id="ann", total_profit=480)
        result = Result.ok(stats)
        assert result.success is True
        assert result.value is stats
        assert result.error is None
        assert result.error_code is None

    def test_ok_without_value(self):
        """Result.ok() is valid without a value."""
        result = Result.ok()
        assert result.success is True
        assert result.value is None

    def test_fail_with_code(self):
        """Result.fail(msg, code) carries message and code."""
        result = Result.fail("Player zzz not found", code=error_codes.PLAYER_NOT_FOUND)
        assert result.success is False
        assert result.value is None
        assert result.error == "Player zzz not found"
        assert result.error_code == error_codes.PLAYER_NOT_FOUND

    def test_fail_without_code(self):
        """The error code is optional."""
        assert Result.fail("boom").error_code is None


class TestResultBehaviour:
    """Tests for truthiness, unwrapping and chaining."""

    def test_truthiness(self):
        """Success is truthy, failure is falsy."""
        assert Result.ok([])
        assert not Result.fail("error")

    def test_unwrap(self):
        """unwrap() returns the value or raises ValueError."""
        assert Result.ok(42).unwrap() == 42
        with pytest.raises(ValueError, match="Cannot unwrap failed result"):
            Result.fail("Something went wrong").unwrap()

    def test_unwrap_or(self):
        """unwrap_or() falls back to the default on failure."""
        assert Result.ok([1]).unwrap_or([]) == [1]
        assert Result.fail("error").unwrap_or([]) == []

    def test_map_chain(self):
        """map() chains on success."""
        result = Result.ok([100, -40]).map(lambda xs: Result.ok(sum(xs))).map(lambda x: Result.ok(x * 2))
        assert result.value == 120

    def test_map_passes_failure_through(self):
        """map() leaves a failure untouched."""
        failed = Result.fail("Forecast needs at least 2 players", code=error_codes.INSUFFICIENT_PLAYERS)
        mapped = failed.map(lambda x: Result.ok(x))
        assert mapped is failed

    def test_result_is_frozen(self):
        """Result is immutable."""
        result = Result.ok(42)
        with pytest.raises(FrozenInstanceError):
            result.value = 100


class TestErrorCodes:
    """Tests for error code constants."""

    def test_error_codes_are_unique_strings(self):
        """All public codes are distinct strings."""
        codes = [
            value
            for name, value in inspect.getmembers(error_codes)
            if not name.startswith("_") and isinstance(value, str)
        ]
        assert codes
        assert len(codes) == len(set(codes)), "Duplicate error codes found"

    def test_codes_used_by_the_service_exist(self):
        """The codes the analytics service reports are defined."""
        for name in ("PLAYER_NOT_FOUND", "INSUFFICIENT_PLAYERS", "DUPLICATE_PLAYERS", "INVALID_PERIOD"):
            assert hasattr(error_codes, name)

    def test_no_unused_codes(self):
        """Every defined code is one the analytics service can report."""
        defined = {
            name
            for name, value in inspect.getmembers(error_codes)
            if name.isupper() and isinstance(value, str)
        }
        assert defined == {
            "VALIDATION_ERROR",
            "PLAYER_NOT_FOUND",
            "INSUFFICIENT_PLAYERS",
            "DUPLICATE_PLAYERS",
            "INVALID_PERIOD",
        }
