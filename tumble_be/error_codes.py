class ErrorCodes:
    GENERIC_ERROR = "GENERIC_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_BET = "INVALID_BET"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    RATE_LIMITED = "RATE_LIMITED"
    ROUND_ABORTED = "ROUND_ABORTED"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
