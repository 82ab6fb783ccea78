import pytest
from tumble_be.exceptions import (
    AppException,
    ValidationException,
    RoundAbortedException
)
from tumble_be.error_codes import ErrorCodes

def test_app_exception_instantiation():
    error_code = "TEST_001"
    status_message = "Test message"
    status_code = 400
    details = {"field": "value"}
    action_button = {"text": "Retry", "actionType": "RETRY_ACTION"}

    exc = AppException(
        error_code=error_code,
        status_message=status_message,
        status_code=status_code,
        details=details,
        action_button=action_button
    )

    assert exc.error_code == error_code
    assert exc.status_message == status_message
    assert exc.status_code == status_code
    assert exc.details == details
    assert exc.action_button == action_button
    assert str(exc) == status_message

def test_app_exception_defaults():
    exc = AppException(error_code="TEST_002", status_message="Default test", status_code=500)
    assert exc.details == {}
    assert exc.action_button == {}

def test_validation_exception():
    details = {"field": "Invalid format"}
    exc = ValidationException(status_message="Input is invalid", details=details)
    assert exc.error_code == ErrorCodes.VALIDATION_ERROR
    assert exc.status_code == 422
    assert exc.status_message == "Input is invalid"
    assert exc.details == details
    with pytest.raises(ValidationException):
        raise exc

def test_validation_exception_invalid_bet_code():
    exc = ValidationException("Invalid bet amount. Must be greater than zero.", error_code=ErrorCodes.INVALID_BET)
    assert exc.error_code == ErrorCodes.INVALID_BET
    assert exc.status_code == 422

def test_round_aborted_exception():
    exc = RoundAbortedException(details={"max_tumble_steps": 10, "steps_resolved": 10})
    assert exc.error_code == ErrorCodes.ROUND_ABORTED
    assert exc.status_code == 503
    assert exc.status_message == "Round aborted: tumble step limit exceeded"
    assert exc.details["steps_resolved"] == 10
    with pytest.raises(RoundAbortedException):
        raise exc

def test_exception_inheritance():
    assert issubclass(ValidationException, AppException)
    assert issubclass(RoundAbortedException, AppException)

def test_only_live_exceptions_exported():
    import tumble_be.exceptions as exceptions_module
    for removed in ('NotFoundException', 'GameLogicException', 'InternalServerErrorException'):
        assert not hasattr(exceptions_module, removed)
    assert not hasattr(ErrorCodes, 'GAME_LOGIC_ERROR')
