"""Tests for error types and codes."""

import pytest

from opsprune.core.errors import (
    ConfigError,
    ErrorCode,
    InternalError,
    OpsPruneError,
    ProjectError,
    SchemaError,
    UsageMapError,
)


class TestErrorCode:
    """Error code value tests."""

    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.CONFIG_PARSE_ERROR, 2000),
            (ErrorCode.CONFIG_INVALID_VALUE, 2000),
            (ErrorCode.TSCONFIG_NOT_FOUND, 3000),
            (ErrorCode.USAGE_MAP_PARSE_ERROR, 4000),
            (ErrorCode.SCHEMA_NOT_FOUND, 5000),
            (ErrorCode.SCHEMA_ARG_NOT_OBJECT, 5000),
            (ErrorCode.INTERNAL_ERROR, 9000),
        ],
    )
    def test_given_error_code_when_checked_then_in_correct_range(
        self, code: ErrorCode, expected_range: int
    ) -> None:
        """Error codes fall within their designated numeric range."""
        # Given
        error_code = code

        # When
        value = error_code.value

        # Then
        assert expected_range <= value < expected_range + 1000


class TestOpsPruneError:
    """Base error behavior tests."""

    def test_given_error_when_to_dict_then_serializes_all_fields(self) -> None:
        """Error serializes to dict with all required fields."""
        # Given
        error = OpsPruneError(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message="Test message",
            retryable=True,
            details={"key": "value"},
        )

        # When
        result = error.to_dict()

        # Then
        assert result == {
            "code": 2001,
            "error": "CONFIG_PARSE_ERROR",
            "message": "Test message",
            "retryable": True,
            "details": {"key": "value"},
        }

    def test_given_error_when_str_then_human_readable(self) -> None:
        """Error string representation is human readable."""
        # Given
        error = OpsPruneError(code=ErrorCode.INTERNAL_ERROR, message="Something broke")

        # When
        result = str(error)

        # Then
        assert result == "[9001] INTERNAL_ERROR: Something broke"

    def test_given_subclass_when_raised_then_caught_as_base(self) -> None:
        """Every domain error is an OpsPruneError."""
        with pytest.raises(OpsPruneError):
            raise SchemaError.schema_not_found("resource.ts")


class TestConfigError:
    """ConfigError factory method tests."""

    def test_given_parse_failure_when_parse_error_then_includes_path(self) -> None:
        # When
        error = ConfigError.parse_error("/path/config.yaml", "invalid YAML")

        # Then
        assert error.code == ErrorCode.CONFIG_PARSE_ERROR
        assert "/path/config.yaml" in error.message
        assert error.details["reason"] == "invalid YAML"

    def test_given_bad_value_when_invalid_value_then_stringifies_value(self) -> None:
        # When
        error = ConfigError.invalid_value("apply.on_existing", 42, "bad choice")

        # Then
        assert error.code == ErrorCode.CONFIG_INVALID_VALUE
        assert error.details == {"field": "apply.on_existing", "value": "42", "reason": "bad choice"}


class TestSchemaError:
    """SchemaError messages are part of the user-facing contract."""

    def test_schema_not_found_message(self) -> None:
        error = SchemaError.schema_not_found("resource.ts")
        assert error.message == "schema() not found"
        assert error.details == {"path": "resource.ts"}

    def test_schema_arg_not_object_message(self) -> None:
        error = SchemaError.schema_arg_not_object("resource.ts")
        assert error.message == "schema() arg is not object"
        assert error.code == ErrorCode.SCHEMA_ARG_NOT_OBJECT

    def test_resource_not_found_mentions_path(self) -> None:
        error = SchemaError.resource_not_found("/tmp/missing.ts")
        assert "/tmp/missing.ts" in error.message
        assert error.code == ErrorCode.RESOURCE_NOT_FOUND


class TestOtherFactories:
    """Remaining factories carry their codes and context."""

    @pytest.mark.parametrize(
        ("error", "code"),
        [
            (ProjectError.tsconfig_not_found("/p/tsconfig.json"), ErrorCode.TSCONFIG_NOT_FOUND),
            (ProjectError.tsconfig_parse_error("/p/tsconfig.json", "x"), ErrorCode.TSCONFIG_PARSE_ERROR),
            (UsageMapError.file_not_found("/u.json"), ErrorCode.USAGE_MAP_NOT_FOUND),
            (UsageMapError.parse_error("/u.json", "x"), ErrorCode.USAGE_MAP_PARSE_ERROR),
            (UsageMapError.invalid_shape("/u.json", "x"), ErrorCode.USAGE_MAP_INVALID_SHAPE),
            (UsageMapError.unreadable("/u.json", "x"), ErrorCode.USAGE_MAP_UNREADABLE),
        ],
    )
    def test_factory_codes(self, error: OpsPruneError, code: ErrorCode) -> None:
        assert error.code == code
        assert error.retryable is False
        assert error.details

    def test_internal_unexpected_keeps_details(self) -> None:
        error = InternalError.unexpected("overlap", model="Todo")
        assert error.code == ErrorCode.INTERNAL_ERROR
        assert error.details == {"model": "Todo"}
        assert "overlap" in error.message
