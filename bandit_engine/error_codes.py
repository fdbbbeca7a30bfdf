class ErrorCodes:
    """Machine-readable codes carried by every AppException."""

    INVALID_CONFIGURATION = "BE_INVALID_CONFIGURATION"
    INVALID_INPUT = "BE_INVALID_INPUT"
    CONFIG_VALIDATION_ERROR = "BE_CONFIG_VALIDATION_ERROR"
