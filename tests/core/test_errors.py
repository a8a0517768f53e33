"""
Unit tests for the service error taxonomy.
"""

import pytest
from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError

from placement_portal.core.config import DEFAULT_JWT_SECRET, Settings, validate_settings
from placement_portal.core.errors import (
    ConflictError,
    FatalConfigError,
    NotFoundError,
    TransientStorageError,
    raise_http_error,
    translate_storage_error,
    unexpected_error,
)


class TestTranslateStorageError:
    """Tests for translate_storage_error."""

    def test_integrity_error_is_conflict(self):
        error = translate_storage_error(IntegrityError("INSERT", {}, Exception("duplicate")))
        assert isinstance(error, ConflictError)
        assert error.error_code == "CONSTRAINT_VIOLATION"

    def test_lost_connection_is_transient(self):
        error = translate_storage_error(OperationalError("SELECT", {}, Exception("reset")))
        assert isinstance(error, TransientStorageError)
        assert error.status_code == 503

    def test_timeout_is_transient(self):
        assert isinstance(translate_storage_error(TimeoutError()), TransientStorageError)


class TestHttpMapping:
    """Tests for raise_http_error and unexpected_error."""

    def test_service_error_keeps_code_and_status(self):
        with pytest.raises(HTTPException) as exc_info:
            raise_http_error(NotFoundError("Drive 3 not found", "DRIVE_NOT_FOUND"))

        assert exc_info.value.status_code == 404
        assert exc_info.value.detail == {
            "error": "DRIVE_NOT_FOUND",
            "message": "Drive 3 not found",
        }

    def test_unexpected_storage_error_is_503(self):
        error = unexpected_error(ProgrammingError("SELECT", {}, Exception("bad")))
        assert error.status_code == 503

    def test_unexpected_error_hides_details(self):
        error = unexpected_error(KeyError("secret detail"))
        assert error.status_code == 500
        assert "secret detail" not in str(error.detail)


class TestValidateSettings:
    """Tests for validate_settings."""

    def test_production_requires_jwt_secret(self):
        with pytest.raises(FatalConfigError):
            validate_settings(Settings(python_env="production", jwt_secret_key=DEFAULT_JWT_SECRET))

    def test_development_allows_default_secret(self):
        validate_settings(Settings(python_env="development"))
