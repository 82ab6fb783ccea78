from tumble_be.error_codes import ErrorCodes

class AppException(Exception):
    def __init__(self, error_code, status_message, status_code, details=None, action_button=None):
        super().__init__(status_message)
        self.error_code = error_code
        self.status_message = status_message
        self.status_code = status_code
        self.details = details if details is not None else {}
        self.action_button = action_button if action_button is not None else {}

class ValidationException(AppException):
    def __init__(self, status_message="Validation failed", details=None, action_button=None, error_code=ErrorCodes.VALIDATION_ERROR):
        super().__init__(
            error_code=error_code,
            status_message=status_message,
            status_code=422,
            details=details,
            action_button=action_button
        )

class RoundAbortedException(AppException):
    """Raised when a round exceeds the configured tumble step bound. No partial result is paid."""
    def __init__(self, status_message="Round aborted: tumble step limit exceeded", details=None, action_button=None):
        super().__init__(
            error_code=ErrorCodes.ROUND_ABORTED,
            status_message=status_message,
            status_code=503,
            details=details,
            action_button=action_button
        )
