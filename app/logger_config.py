import logging

from app.core.config import APP_LOGGER_NAME, LOG_LEVEL

logger = logging.getLogger(APP_LOGGER_NAME)
logger.setLevel(LOG_LEVEL)

LOG_FORMAT = "%(asctime)s.%(msecs)03d - %(filename)s - %(funcName)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

console_handler = logging.StreamHandler()
console_handler.setLevel(LOG_LEVEL)
console_handler.setFormatter(formatter)
logger.addHandler(console_handler)

# Avoid duplicate logs when imported in multiple modules
logger.propagate = False
