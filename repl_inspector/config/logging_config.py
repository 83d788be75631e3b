import json
import logging

from repl_inspector.checks.base import ConfigurationError
from repl_inspector.config.base import GeneralConfig

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    def format(self, record):
        payload = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(general: GeneralConfig):
    """
    Route the package loggers to stderr, plus general.log_file when set.
    stdout is left to the report.
    """
    level = logging.getLevelName(general.log_level.upper())
    if not isinstance(level, int):
        raise ConfigurationError(f"Unknown log level: {general.log_level}")

    formatter = JsonFormatter() if general.log_format == "json" else logging.Formatter(TEXT_FORMAT)
    # handlers are built first so a bad log file leaves the current setup in place
    handlers = [logging.StreamHandler()]
    if general.log_file:
        try:
            handlers.append(logging.FileHandler(general.log_file, encoding="utf-8"))
        except OSError as e:
            raise ConfigurationError(f"Cannot open log file '{general.log_file}': {e}") from e

    package_logger = logging.getLogger("repl_inspector")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)
    package_logger.setLevel(level)
    package_logger.propagate = False
    return package_logger
