"""
Logging for the ``quizstack_app`` logger.

The logger shares its name with the package, so it is also Flask's
``app.logger`` and the parent of every module logger in the package.
"""

import json
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

LOGGER_NAME = 'quizstack_app'
LOG_FILE = 'quizstack.log'
TEXT_FORMAT = '%(asctime)s [%(levelname)s] %(module)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            'time': self.formatTime(record, DATE_FORMAT),
            'level': record.levelname,
            'module': record.module,
            'message': record.getMessage(),
        }
        if record.exc_info:
            entry['exc_info'] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(
    app=None,
    log_level: str = 'INFO',
    log_dir: Optional[str] = None,
    json_format: bool = False
) -> logging.Logger:
    """
    Send ``quizstack_app`` records to the console and, when ``log_dir`` is
    set, to a rotating ``quizstack.log`` (10 MB x 5) in that directory.
    """
    level = getattr(logging, str(log_level).upper(), logging.INFO)
    formatter = JsonFormatter() if json_format else logging.Formatter(TEXT_FORMAT, DATE_FORMAT)

    handlers = [logging.StreamHandler()]
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(RotatingFileHandler(
            os.path.join(log_dir, LOG_FILE),
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding='utf-8',
        ))

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    if app is not None:
        # dev-server request lines
        logging.getLogger('werkzeug').setLevel(logging.WARNING)

    logger.info("Logging initialized: level=%s, dir=%s", logging.getLevelName(level), log_dir or '<console>')
    return logger
