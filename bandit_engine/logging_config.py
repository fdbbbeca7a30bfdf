import logging

from pythonjsonlogger.json import JsonFormatter

JSON_LOG_FORMAT = '%(asctime)s %(levelname)s %(session_id)s %(module)s %(funcName)s %(lineno)d %(message)s'
TEXT_LOG_FORMAT = '%(asctime)s %(levelname)s [%(session_id)s] %(name)s: %(message)s'


# Custom Logging Filter for machine session ids
class SessionIdFilter(logging.Filter):
    def filter(self, record):
        if not getattr(record, 'session_id', None):
            record.session_id = 'N/A'
        return True


def configure_logging(level=None, json_output=None, logger_name='bandit_engine'):
    """
    Install a single stream handler on the package logger.

    Args:
        level (str | int, optional): Log level; defaults to Config.LOG_LEVEL.
        json_output (bool, optional): Emit JSON records; defaults to Config.LOG_JSON.
        logger_name (str): Logger to configure.

    Returns:
        logging.Logger: The configured logger.
    """
    if level is None or json_output is None:
        from bandit_engine.config import Config
        level = Config.LOG_LEVEL if level is None else level
        json_output = Config.LOG_JSON if json_output is None else json_output

    logger = logging.getLogger(logger_name)
    handler = logging.StreamHandler()
    if json_output:
        formatter = JsonFormatter(JSON_LOG_FORMAT)
    else:
        formatter = logging.Formatter(TEXT_LOG_FORMAT)
    handler.setFormatter(formatter)
    handler.addFilter(SessionIdFilter())
    if logger.hasHandlers():
        logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
