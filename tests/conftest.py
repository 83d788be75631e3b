import logging

import pytest

from repl_inspector.cluster.resolver import StaticTableResolver, ChainResolver
from repl_inspector.config.base import ConnectionTarget


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    package_logger = logging.getLogger("repl_inspector")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def target():
    return ConnectionTarget(host="10.0.0.1", port=5432, user="postgres", database="postgres", password="secret")


@pytest.fixture
def resolver():
    # no DNS in unit tests
    return ChainResolver([StaticTableResolver({
        "192.168.1.101": "myhost1.testmachine.com",
        "10.0.0.1": "db1.example.com",
    })])
