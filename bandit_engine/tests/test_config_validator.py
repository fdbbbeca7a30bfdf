import os
import unittest
from unittest.mock import patch

import pytest

from bandit_engine.config_validator import (
    DEFAULT_SIMULATION_SPINS, ConfigValidationError, ConfigValidator, validate_engine_config
)


class TestEnvironmentDetection(unittest.TestCase):

    def test_production_when_nothing_is_set(self):
        with patch.dict(os.environ, {}, clear=True):
            self.assertTrue(ConfigValidator().is_production)

    def test_development_env(self):
        with patch.dict(os.environ, {'BANDIT_ENV': 'development'}, clear=True):
            self.assertFalse(ConfigValidator().is_production)

    def test_debug_flag_implies_development(self):
        with patch.dict(os.environ, {'BANDIT_DEBUG': 'true'}, clear=True):
            self.assertFalse(ConfigValidator().is_production)

    def test_explicit_production_wins_over_debug(self):
        with patch.dict(os.environ, {'BANDIT_ENV': 'production', 'BANDIT_DEBUG': '1'}, clear=True):
            self.assertTrue(ConfigValidator().is_production)


class TestValidateAll(unittest.TestCase):

    def test_production_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = ConfigValidator(is_production=True).validate_all()
        self.assertTrue(config['IS_PRODUCTION'])
        self.assertFalse(config['DEBUG'])
        self.assertIsNone(config['RNG_SEED'])
        self.assertEqual(config['LOG_LEVEL'], 'INFO')
        self.assertTrue(config['LOG_JSON'])
        self.assertEqual(config['SIMULATION_SPINS'], DEFAULT_SIMULATION_SPINS)

    def test_development_defaults_to_text_logs(self):
        with patch.dict(os.environ, {}, clear=True):
            config = ConfigValidator(is_production=False).validate_all()
        self.assertFalse(config['LOG_JSON'])

    def test_seed_allowed_in_development_with_warning(self):
        with patch.dict(os.environ, {'BANDIT_RNG_SEED': '42'}, clear=True):
            with pytest.warns(UserWarning, match="fixed RNG seed"):
                config = ConfigValidator(is_production=False).validate_all()
        self.assertEqual(config['RNG_SEED'], 42)

    def test_seed_rejected_in_production(self):
        with patch.dict(os.environ, {'BANDIT_RNG_SEED': '42'}, clear=True):
            with self.assertRaises(ConfigValidationError) as ctx:
                ConfigValidator(is_production=True).validate_all()
        self.assertIn('BANDIT_RNG_SEED', str(ctx.exception))

    def test_non_integer_seed(self):
        with patch.dict(os.environ, {'BANDIT_RNG_SEED': 'lucky'}, clear=True):
            with self.assertRaises(ConfigValidationError):
                ConfigValidator(is_production=False).validate_all()

    def test_invalid_log_level(self):
        with patch.dict(os.environ, {'BANDIT_LOG_LEVEL': 'LOUD'}, clear=True):
            with self.assertRaises(ConfigValidationError):
                ConfigValidator(is_production=False).validate_all()

    def test_log_level_is_normalised(self):
        with patch.dict(os.environ, {'BANDIT_LOG_LEVEL': 'debug', 'BANDIT_LOG_JSON': 'true'}, clear=True):
            config = ConfigValidator(is_production=False).validate_all()
        self.assertEqual(config['LOG_LEVEL'], 'DEBUG')
        self.assertTrue(config['LOG_JSON'])

    def test_plain_logs_in_production_warn(self):
        with patch.dict(os.environ, {'BANDIT_LOG_JSON': 'false'}, clear=True):
            with pytest.warns(UserWarning, match="Plain-text logging"):
                config = ConfigValidator(is_production=True).validate_all()
        self.assertFalse(config['LOG_JSON'])

    def test_simulation_spins(self):
        with patch.dict(os.environ, {'BANDIT_SIMULATION_SPINS': '500'}, clear=True):
            config = ConfigValidator(is_production=False).validate_all()
        self.assertEqual(config['SIMULATION_SPINS'], 500)

        with patch.dict(os.environ, {'BANDIT_SIMULATION_SPINS': '0'}, clear=True):
            with self.assertRaises(ConfigValidationError):
                ConfigValidator(is_production=False).validate_all()

    def test_debug_rejected_in_production(self):
        with patch.dict(os.environ, {'BANDIT_DEBUG': 'true'}, clear=True):
            with self.assertRaises(ConfigValidationError) as ctx:
                ConfigValidator(is_production=True).validate_all()
        self.assertTrue(any('Debug' in e for e in ctx.exception.details['errors']))

    def test_validate_engine_config_reports_and_reraises(self):
        env = {'BANDIT_ENV': 'production', 'BANDIT_RNG_SEED': '3'}
        with patch.dict(os.environ, env, clear=True):
            with patch('sys.stderr') as stderr:
                with self.assertRaises(ConfigValidationError):
                    validate_engine_config()
        self.assertTrue(stderr.write.called)


if __name__ == '__main__':
    unittest.main()
