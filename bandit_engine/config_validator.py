"""
Environment validation for the payout engine.

Settings are checked once at import of ``bandit_engine.config`` so that a
misconfigured deployment (for example a fixed RNG seed in production) fails
before any machine session is created.
"""

import logging
import os
import sys
import warnings
from typing import List, Optional

from bandit_engine.error_codes import ErrorCodes
from bandit_engine.exceptions import AppException

TRUTHY = ('true', '1', 't')
DEFAULT_SIMULATION_SPINS = 10000


class ConfigValidationError(AppException):
    """Raised when engine settings are missing or invalid."""
    def __init__(self, status_message="Configuration validation failed", details=None):
        super().__init__(
            error_code=ErrorCodes.CONFIG_VALIDATION_ERROR,
            status_message=status_message,
            details=details
        )


class ConfigValidator:
    """Validates engine settings taken from the environment."""

    def __init__(self, is_production: bool = None):
        """
        Args:
            is_production: If None, auto-detect from BANDIT_ENV and BANDIT_DEBUG
        """
        if is_production is None:
            bandit_env = os.getenv('BANDIT_ENV', '').lower()
            bandit_debug = os.getenv('BANDIT_DEBUG', 'False').lower()
            is_production = (
                bandit_env == 'production' or
                (bandit_env != 'development' and bandit_debug not in TRUTHY)
            )

        self.is_production = is_production
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def _read_int(self, var_name: str) -> Optional[int]:
        raw = os.getenv(var_name)
        if raw is None or not raw.strip():
            return None
        try:
            return int(raw.strip())
        except ValueError:
            self.errors.append(f"CRITICAL: {var_name} must be an integer (got '{raw}')")
            return None

    def validate_rng_config(self) -> Optional[int]:
        """A fixed seed makes every session replay the same reels, so it is development-only."""
        seed = self._read_int('BANDIT_RNG_SEED')
        if seed is not None:
            if self.is_production:
                self.errors.append(
                    "CRITICAL: BANDIT_RNG_SEED must not be set in production. "
                    "Sessions would draw identical reel sequences."
                )
            else:
                self.warnings.append(f"Using fixed RNG seed {seed} - reel draws are reproducible")
        return seed

    def validate_logging_config(self):
        """Returns (level_name, json_output)."""
        level = os.getenv('BANDIT_LOG_LEVEL', 'INFO').upper()
        if not isinstance(logging.getLevelName(level), int):
            self.errors.append(f"CRITICAL: BANDIT_LOG_LEVEL '{level}' is not a logging level")
            level = 'INFO'

        raw_json = os.getenv('BANDIT_LOG_JSON')
        if raw_json is None or not raw_json.strip():
            json_output = self.is_production
        else:
            json_output = raw_json.strip().lower() in TRUTHY
            if self.is_production and not json_output:
                self.warnings.append("Plain-text logging enabled in production (BANDIT_LOG_JSON=False)")
        return level, json_output

    def validate_simulation_config(self) -> int:
        spins = self._read_int('BANDIT_SIMULATION_SPINS')
        if spins is None:
            return DEFAULT_SIMULATION_SPINS
        if spins <= 0:
            self.errors.append("CRITICAL: BANDIT_SIMULATION_SPINS must be a positive integer")
            return DEFAULT_SIMULATION_SPINS
        return spins

    def validate_all(self) -> dict:
        """
        Validate all engine settings.

        Returns:
            Dictionary containing validated configuration values

        Raises:
            ConfigValidationError: If any critical check failed
        """
        config = {}

        config['IS_PRODUCTION'] = self.is_production
        config['DEBUG'] = os.getenv('BANDIT_DEBUG', 'False').lower() in TRUTHY
        config['RNG_SEED'] = self.validate_rng_config()
        config['LOG_LEVEL'], config['LOG_JSON'] = self.validate_logging_config()
        config['SIMULATION_SPINS'] = self.validate_simulation_config()

        if self.is_production and config['DEBUG']:
            self.errors.append("CRITICAL: Debug mode must be disabled in production (set BANDIT_DEBUG=False)")

        if self.errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {error}" for error in self.errors)
            if self.warnings:
                error_msg += "\n\nWarnings:\n" + "\n".join(f"  - {warning}" for warning in self.warnings)
            raise ConfigValidationError(error_msg, details={'errors': list(self.errors)})

        for warning in self.warnings:
            warnings.warn(warning, UserWarning)

        return config


def validate_engine_config() -> dict:
    """
    Validate engine settings with fail-fast behavior.

    Raises:
        ConfigValidationError: If critical configuration is invalid
    """
    try:
        validator = ConfigValidator()
        return validator.validate_all()
    except ConfigValidationError as e:
        print("\nCONFIGURATION VALIDATION FAILED\n", file=sys.stderr)
        print(str(e), file=sys.stderr)
        raise
