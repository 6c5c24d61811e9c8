import os
from pathlib import Path

import pytest

# Test directory -> marker applied to every test collected below it.
LAYER_MARKERS = {
    "domain": pytest.mark.domain,
    "application": pytest.mark.application,
    "integration": pytest.mark.integration,
    "bdd": pytest.mark.bdd,
}


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Protean config environment (PROTEAN_ENV) for the storefront domain",
    )


def pytest_sessionstart(session):
    """Initialise the storefront domain once and keep its context active.

    Fixtures and tests then reach aggregates and repositories through
    ``current_domain`` without pushing a context of their own.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env

    from storefront.domain import storefront

    storefront.init()
    storefront.domain_context().push()


def pytest_collection_modifyitems(config, items):
    for item in items:
        parts = Path(item.fspath).parts
        for layer, marker in LAYER_MARKERS.items():
            if layer in parts:
                item.add_marker(marker)
                break

        # HTTP round trips are the slow part of the suite
        if "integration" in parts and not any(m.name == "fast" for m in item.iter_markers()):
            item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session", autouse=True)
def database():
    from storefront.domain import storefront
    from storefront.utils.db import drop_db, setup_db

    setup_db(storefront)
    yield
    drop_db(storefront)


@pytest.fixture(autouse=True)
def checkout_settings(monkeypatch):
    """Start every test from the default checkout knobs, whatever the shell exports."""
    for name in list(os.environ):
        if name.startswith("STOREFRONT_"):
            monkeypatch.delenv(name)


@pytest.fixture(autouse=True)
def clean_state():
    """Wipe stored aggregates, events and bound log context after each test."""
    yield

    from protean import current_domain
    from storefront.utils.logging import clear_context

    for provider in current_domain.providers.values():
        provider._data_reset()
    current_domain.event_store.store._data_reset()
    clear_context()
