import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def checkout_bed():
    from checkout.domain import checkout
    from checkout.utils.db import drop_db, setup_db

    bed = DomainFixture(checkout)
    bed.setup()
    setup_db(checkout)
    yield bed
    drop_db(checkout)
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(checkout_bed, monkeypatch):
    """Run every test inside the checkout domain with empty stores and no trigger secrets."""
    from protean import current_domain

    monkeypatch.delenv("CRON_SECRET", raising=False)
    monkeypatch.delenv("ADMIN_API_KEY", raising=False)

    with checkout_bed.domain_context():
        yield

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()
