"""Factories for collection and launch pool models."""

import factory
from faker import Faker

from squidmarket.data.models.collection import CollectionSummary
from squidmarket.data.models.launch_pool import LaunchPool, LaunchStatus

fake = Faker()


def generate_evm_address() -> str:
    """Generate a random lowercase 20-byte hex address."""
    return "0x" + fake.hexify(text="^" * 40)


class CollectionSummaryFactory(factory.Factory):
    """Factory for CollectionSummary model.

    Usage:
        summary = CollectionSummaryFactory()
        empty = CollectionSummaryFactory(total_supply=0)
    """

    class Meta:
        model = CollectionSummary

    address = factory.LazyFunction(generate_evm_address)
    name = factory.LazyFunction(lambda: fake.word().title() + " Club")
    symbol = factory.LazyFunction(lambda: fake.lexify(text="????").upper())
    total_supply = factory.LazyFunction(lambda: fake.random_int(min=1, max=100))
    verified = False
    introspectable = True


class LaunchPoolFactory(factory.Factory):
    """Factory for LaunchPool rows."""

    class Meta:
        model = LaunchPool

    id = factory.LazyFunction(lambda: str(fake.uuid4()))
    launch_id = factory.Sequence(lambda n: n + 1)
    contract_address = factory.LazyFunction(generate_evm_address)
    launchpad_address = factory.LazyFunction(generate_evm_address)
    name = factory.LazyFunction(lambda: fake.word().title() + " Launch")
    symbol = "LNCH"
    description = factory.LazyFunction(fake.sentence)
    image_uri = None
    max_supply = 100
    creator = factory.LazyFunction(generate_evm_address)
    status = LaunchStatus.PENDING
