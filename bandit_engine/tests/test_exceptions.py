import pytest
from bandit_engine.exceptions import (
    AppException,
    InvalidConfigurationException,
    InvalidInputException
)
from bandit_engine.config_validator import ConfigValidationError
from bandit_engine.error_codes import ErrorCodes

def test_app_exception_instantiation():
    details = {"field": "value"}
    exc = AppException(error_code="TEST_001", status_message="Test message", details=details)

    assert exc.error_code == "TEST_001"
    assert exc.status_message == "Test message"
    assert exc.details == details
    assert str(exc) == "Test message"

def test_app_exception_defaults():
    exc = AppException(error_code="TEST_002", status_message="Default test")
    assert exc.details == {}

def test_invalid_configuration_exception():
    exc = InvalidConfigurationException(status_message="weight_table[1] is empty.", details={"reel": 1})
    assert exc.error_code == ErrorCodes.INVALID_CONFIGURATION
    assert exc.details == {"reel": 1}
    assert isinstance(exc, AppException)
    with pytest.raises(InvalidConfigurationException):
        raise exc

def test_invalid_configuration_default_message():
    assert InvalidConfigurationException().status_message == "Invalid reel configuration"

def test_invalid_input_exception():
    exc = InvalidInputException(status_message="Bet must be between 0 and 3")
    assert exc.error_code == ErrorCodes.INVALID_INPUT
    assert str(exc) == "Bet must be between 0 and 3"
    with pytest.raises(AppException):
        raise exc

def test_config_validation_error():
    exc = ConfigValidationError("bad settings", details={"errors": ["x"]})
    assert exc.error_code == ErrorCodes.CONFIG_VALIDATION_ERROR
    assert exc.details["errors"] == ["x"]
