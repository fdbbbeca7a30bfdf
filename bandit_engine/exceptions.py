from bandit_engine.error_codes import ErrorCodes

class AppException(Exception):
    def __init__(self, error_code, status_message, details=None):
        super().__init__(status_message)
        self.error_code = error_code
        self.status_message = status_message
        self.details = details if details is not None else {}

class InvalidConfigurationException(AppException):
    """A structural invariant of a reel configuration is violated."""
    def __init__(self, status_message="Invalid reel configuration", details=None):
        super().__init__(
            error_code=ErrorCodes.INVALID_CONFIGURATION,
            status_message=status_message,
            details=details
        )

class InvalidInputException(AppException):
    """The caller passed an out-of-range bet, reel or payline."""
    def __init__(self, status_message="Invalid input", details=None):
        super().__init__(
            error_code=ErrorCodes.INVALID_INPUT,
            status_message=status_message,
            details=details
        )
