import json
import logging

import pytest

from repl_inspector.checks.base import ConfigurationError
from repl_inspector.config.base import GeneralConfig
from repl_inspector.config.logging_config import configure_logging


def test_json_log_file(tmp_path):
    log_file = tmp_path / "inspector.log"
    package_logger = configure_logging(GeneralConfig(log_level="info", log_file=str(log_file), log_format="json"))

    logging.getLogger("repl_inspector.checks.role_check").info("Node %s classified as %s", "10.0.0.1", "primary")
    for handler in package_logger.handlers:
        handler.flush()

    record = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
    assert record["level"] == "INFO"
    assert record["logger"] == "repl_inspector.checks.role_check"
    assert record["message"] == "Node 10.0.0.1 classified as primary"


def test_reconfiguring_replaces_handlers():
    configure_logging(GeneralConfig())
    package_logger = configure_logging(GeneralConfig(log_level="debug"))
    assert len(package_logger.handlers) == 1
    assert package_logger.level == logging.DEBUG


def test_unknown_level_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        configure_logging(GeneralConfig(log_level="chatty"))


def test_unwritable_log_file_keeps_current_handlers(tmp_path):
    package_logger = configure_logging(GeneralConfig())
    before = list(package_logger.handlers)

    with pytest.raises(ConfigurationError, match="Cannot open log file"):
        configure_logging(GeneralConfig(log_file=str(tmp_path / "missing" / "inspector.log")))

    assert package_logger.handlers == before
