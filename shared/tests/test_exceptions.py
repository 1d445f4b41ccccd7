"""Tests for the error taxonomy and its HTTP rendering."""

from django.test import override_settings
from rest_framework import exceptions

from shared.api.exception_handler import exception_handler
from shared.domain.exceptions import ConflictError, ForbiddenError, InternalError


def test_conflict_body_carries_extra_fields():
    error = ConflictError(
        "Room is not available for the selected time period",
        code="booking_conflict",
        extra={"conflictingBooking": {"id": "abc"}},
    )

    assert error.status_code == 409
    assert error.to_dict() == {
        "code": "booking_conflict",
        "message": "Room is not available for the selected time period",
        "conflictingBooking": {"id": "abc"},
    }


def test_domain_error_response():
    response = exception_handler(ForbiddenError("Nope", code="not_booking_owner"), {})

    assert response.status_code == 403
    assert response.data == {"code": "not_booking_owner", "message": "Nope"}


def test_internal_error_keeps_its_code():
    response = exception_handler(InternalError("Busy", code="lock_timeout"), {})

    assert response.status_code == 500
    assert response.data["code"] == "lock_timeout"


def test_validation_error_response():
    response = exception_handler(exceptions.ValidationError({"roomId": ["This field is required."]}), {})

    assert response.status_code == 400
    assert response.data["code"] == "validation_error"
    assert "roomId" in response.data["details"]


def test_authentication_failures():
    assert exception_handler(exceptions.NotAuthenticated(), {}).data["code"] == "not_authenticated"
    assert exception_handler(exceptions.AuthenticationFailed(), {}).data["code"] == "authentication_failed"
    assert exception_handler(exceptions.PermissionDenied(), {}).data["code"] == "forbidden"


@override_settings(DEBUG=False)
def test_unexpected_errors_hide_details():
    response = exception_handler(RuntimeError("db password is hunter2"), {})

    assert response.status_code == 500
    assert response.data == {"code": "internal_error", "message": "Internal server error"}


@override_settings(DEBUG=True)
def test_unexpected_errors_show_details_in_debug():
    response = exception_handler(RuntimeError("disk full"), {})

    assert response.data["message"] == "disk full"
