import importlib
import io
import json
import logging
import unittest
import warnings
from unittest.mock import patch

from pythonjsonlogger.json import JsonFormatter

from bandit_engine.logging_config import SessionIdFilter, configure_logging


class TestConfigureLogging(unittest.TestCase):

    LOGGER_NAME = 'bandit_engine.tests.logging_capture'

    def tearDown(self):
        logging.getLogger(self.LOGGER_NAME).handlers.clear()

    def _capture(self, logger):
        stream = io.StringIO()
        logger.handlers[0].setStream(stream)
        return stream

    def test_json_output_includes_session_id(self):
        logger = configure_logging(level='DEBUG', json_output=True, logger_name=self.LOGGER_NAME)
        self.assertEqual(len(logger.handlers), 1)
        self.assertIsInstance(logger.handlers[0].formatter, JsonFormatter)
        stream = self._capture(logger)

        logger.info("spin settled", extra={'session_id': 'table-3'})
        record = json.loads(stream.getvalue().strip())
        self.assertEqual(record['message'], "spin settled")
        self.assertEqual(record['session_id'], 'table-3')
        self.assertEqual(record['levelname'], 'INFO')

    def test_missing_session_id_defaults(self):
        logger = configure_logging(level='INFO', json_output=False, logger_name=self.LOGGER_NAME)
        stream = self._capture(logger)
        logger.warning("no session")
        self.assertIn("[N/A]", stream.getvalue())

    def test_reconfiguring_replaces_handler(self):
        configure_logging(level='INFO', json_output=False, logger_name=self.LOGGER_NAME)
        logger = configure_logging(level='WARNING', json_output=True, logger_name=self.LOGGER_NAME)
        self.assertEqual(len(logger.handlers), 1)
        self.assertEqual(logger.level, logging.WARNING)

    def test_defaults_come_from_config(self):
        with patch('bandit_engine.config.Config.LOG_LEVEL', 'ERROR'), \
                patch('bandit_engine.config.Config.LOG_JSON', False):
            logger = configure_logging(logger_name=self.LOGGER_NAME)
        self.assertEqual(logger.level, logging.ERROR)
        self.assertNotIsInstance(logger.handlers[0].formatter, JsonFormatter)

    def test_module_imports_without_deprecation_warnings(self):
        import bandit_engine.logging_config as logging_config
        with warnings.catch_warnings():
            warnings.simplefilter('error', DeprecationWarning)
            importlib.reload(logging_config)
        self.assertIs(logging_config.JsonFormatter, JsonFormatter)


class TestSessionIdFilter(unittest.TestCase):

    def test_keeps_existing_session_id(self):
        record = logging.LogRecord('x', logging.INFO, __file__, 1, "msg", None, None)
        record.session_id = 'abc'
        self.assertTrue(SessionIdFilter().filter(record))
        self.assertEqual(record.session_id, 'abc')

    def test_fills_none_session_id(self):
        record = logging.LogRecord('x', logging.INFO, __file__, 1, "msg", None, None)
        record.session_id = None
        SessionIdFilter().filter(record)
        self.assertEqual(record.session_id, 'N/A')


if __name__ == '__main__':
    unittest.main()
