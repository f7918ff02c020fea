import pytest

from msgledger import EventNode, Environment, LedgerConfig, create_ledger, set_config


@pytest.fixture(autouse=True)
def reset_global_config():
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def config():
    return LedgerConfig.for_environment(Environment.TESTING)


@pytest.fixture
def root():
    return EventNode("form")


@pytest.fixture
def ledger(config, root):
    ledger = create_ledger(config)
    ledger.init(root)
    return ledger
