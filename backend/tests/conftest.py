import logging

import pytest

import simpletax.resolving  # noqa: F401 (register built-in resolvers)

from simpletax.services.simple_tax_config import TAX_RESOLVER_PROPERTY

TEST_LOGGER = "simpletax.tests"


@pytest.fixture
def logger():
    return logging.getLogger(TEST_LOGGER)


@pytest.fixture
def logged(caplog):
    """Return (level, message) pairs logged through the test logger so far."""
    caplog.set_level(logging.DEBUG, logger=TEST_LOGGER)

    def records():
        return [(r.levelname, r.getMessage()) for r in caplog.records if r.name == TEST_LOGGER]

    return records


@pytest.fixture
def with_noop_resolver():
    return {TAX_RESOLVER_PROPERTY: "NullTaxResolver"}
