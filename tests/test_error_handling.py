"""Tests for the error types and the error handling service."""

import json

import httpx
import pytest
from hypothesis import given, settings, strategies as st

from game_catalog.services.errors import (
    AppError,
    ConfigurationError,
    DataSourceError,
    ErrorCategory,
    ErrorHandlingService,
    ErrorSeverity,
    ValidationError,
)


def _status_error(status_code: int, url: str = "https://example.com/games.json") -> httpx.HTTPStatusError:
    request = httpx.Request("GET", url)
    response = httpx.Response(status_code, request=request)
    return httpx.HTTPStatusError(f"HTTP {status_code}", request=request, response=response)


class TestErrorTypes:
    """Unit tests for the AppError hierarchy."""

    def test_data_source_error_defaults(self) -> None:
        error = DataSourceError("Failed to load games", source="https://example.com/games.json")

        assert error.category == ErrorCategory.DATA_SOURCE
        assert error.severity == ErrorSeverity.ERROR
        assert error.recoverable
        assert "Press 'r' to try again" in error.suggested_actions
        assert "Source: https://example.com/games.json" in (error.technical_details or "")

    def test_data_source_error_not_found_suggestions(self) -> None:
        error = DataSourceError("Failed to load games: HTTP error status 404", status_code=404)

        assert error.status_code == 404
        assert "Check catalog_url in the configuration" in error.suggested_actions

    def test_data_source_error_server_suggestions(self) -> None:
        error = DataSourceError("Failed to load games: HTTP error status 503", status_code=503)

        assert "The catalog server is experiencing issues" in error.suggested_actions

    def test_data_source_error_keeps_original(self) -> None:
        original = httpx.ConnectError("connection refused")
        error = DataSourceError("Failed to load games", original_error=original)

        assert error.original_error is original
        assert "ConnectError: connection refused" in (error.technical_details or "")

    def test_validation_error_details(self) -> None:
        error = ValidationError("Game data must include id and title", field="id", row_index=4)

        assert error.category == ErrorCategory.VALIDATION
        assert error.severity == ErrorSeverity.WARNING
        assert error.row_index == 4
        assert "Field: id" in (error.technical_details or "")
        assert "Row: 4" in (error.technical_details or "")

    def test_configuration_error_expected_hint(self) -> None:
        error = ConfigurationError("Invalid page size", setting="page_size", current_value=0, expected="1-500")

        assert error.category == ErrorCategory.CONFIGURATION
        assert "Expected: 1-500" in error.suggested_actions
        assert "Current: 0" in (error.technical_details or "")

    def test_to_user_friendly(self) -> None:
        error = AppError("Something broke", suggested_actions=["Try again"], technical_details="trace")
        friendly = error.to_user_friendly()

        assert friendly.message == "Something broke"
        assert friendly.category == ErrorCategory.UNEXPECTED
        assert friendly.suggested_actions == ["Try again"]
        assert friendly.technical_details == "trace"


class TestErrorConversion:
    """The service maps library exceptions onto the catalog's error categories."""

    @pytest.mark.parametrize(
        ("error", "category"),
        [
            (_status_error(404), ErrorCategory.DATA_SOURCE),
            (httpx.ReadTimeout("slow"), ErrorCategory.DATA_SOURCE),
            (httpx.ConnectError("refused"), ErrorCategory.DATA_SOURCE),
            (json.JSONDecodeError("Expecting value", "", 0), ErrorCategory.DATA_SOURCE),
            (PermissionError("denied"), ErrorCategory.CACHE),
            (ValueError("bad value"), ErrorCategory.VALIDATION),
            (TypeError("bad type"), ErrorCategory.VALIDATION),
            (RuntimeError("boom"), ErrorCategory.UNEXPECTED),
        ],
    )
    def test_category_mapping(self, error: Exception, category: ErrorCategory) -> None:
        service = ErrorHandlingService()

        user_error = service.handle_error(error, operation="load_catalog", component="test")

        assert user_error.category == category
        assert user_error.message

    def test_http_status_message(self) -> None:
        service = ErrorHandlingService()

        user_error = service.handle_error(_status_error(404), operation="load_catalog", component="test")

        assert user_error.message == "The catalog was not found at the configured location."
        assert "Status: 404" in (user_error.technical_details or "")

    def test_unknown_http_status_message(self) -> None:
        service = ErrorHandlingService()

        user_error = service.handle_error(_status_error(418), operation="load_catalog", component="test")

        assert user_error.message == "HTTP error 418 occurred while loading the catalog."

    def test_app_errors_pass_through(self) -> None:
        service = ErrorHandlingService()
        error = DataSourceError("Invalid data format: expected games array")

        user_error = service.handle_error(error, operation="load_catalog", component="test")

        assert user_error.message == "Invalid data format: expected games array"
        assert service.get_recent_errors() == [error]

    def test_unexpected_error_hides_details_from_message(self) -> None:
        service = ErrorHandlingService()

        user_error = service.handle_error(RuntimeError("secret internals"), operation="search", component="test")

        assert "secret internals" not in user_error.message
        assert "RuntimeError: secret internals" in (user_error.technical_details or "")


class TestErrorHandlingServiceState:
    """**Feature: game-catalog, Property 5: Error recovery state consistency**"""

    @settings(max_examples=50)
    @given(
        errors=st.lists(
            st.sampled_from([
                ValueError("invalid"),
                OSError("disk"),
                RuntimeError("unexpected"),
                httpx.ConnectError("offline"),
            ]),
            min_size=1,
            max_size=30,
        ),
        max_history=st.integers(min_value=1, max_value=20),
    )
    def test_history_is_bounded_and_counted(self, errors: list[Exception], max_history: int) -> None:
        """History never exceeds its bound and category counts always sum to its size."""
        service = ErrorHandlingService(max_history_size=max_history)

        for error in errors:
            user_error = service.handle_error(error, operation="op", component="test")
            assert user_error.recoverable

        history = service.get_recent_errors(count=100)
        assert len(history) == min(len(errors), max_history)
        assert sum(service.get_error_count_by_category().values()) == len(history)

    def test_recent_errors_are_most_recent(self) -> None:
        service = ErrorHandlingService()
        for index in range(5):
            _ = service.handle_error(AppError(f"error {index}"), operation="op", component="test")

        recent = service.get_recent_errors(count=2)

        assert [error.message for error in recent] == ["error 3", "error 4"]


def test_create_user_message_limits_suggestions() -> None:
    service = ErrorHandlingService()
    error = AppError("Catalog unavailable", suggested_actions=["one", "two", "three", "four"])

    message = service.create_user_message(error.to_user_friendly())

    assert message.startswith("Catalog unavailable")
    assert "Suggested actions:" in message
    assert "three" in message
    assert "four" not in message


def test_create_user_message_without_suggestions() -> None:
    service = ErrorHandlingService()
    error = DataSourceError("Failed to load games")

    message = service.create_user_message(error.to_user_friendly(), include_suggestions=False)

    assert message == "Failed to load games"
