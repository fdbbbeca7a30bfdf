"""
Engine settings with fail-fast validation.

Values come from the environment (optionally a ``.env`` file) and are
validated once, when this module is first imported.
"""
from dotenv import load_dotenv

from bandit_engine.config_validator import validate_engine_config

# Load environment variables from .env file
load_dotenv()


class Config:
    """Validated engine settings."""

    _validated_config = validate_engine_config()

    IS_PRODUCTION = _validated_config['IS_PRODUCTION']
    DEBUG = _validated_config['DEBUG']

    # None selects secrets.SystemRandom for every new session
    RNG_SEED = _validated_config['RNG_SEED']

    LOG_LEVEL = _validated_config['LOG_LEVEL']
    LOG_JSON = _validated_config['LOG_JSON']

    # Default Monte Carlo length for SlotTester
    SIMULATION_SPINS = _validated_config['SIMULATION_SPINS']
