import pytest
from delivery.catalogue.restaurant import Item, Restaurant
from delivery.customers.user import User
from delivery.notifications.email import EmailChannel
from delivery.ordering.checkout.orchestrator import OrderOrchestrator
from delivery.payments.wallet import Wallet
from delivery.shared.location import Location


@pytest.fixture
def orchestrator():
    orch = OrderOrchestrator()
    orch.add_restaurant(
        Restaurant.create(
            restaurant_id="1",
            name="Karnot Dhaba",
            location=Location(x=1, y=1),
            items=[Item(item_id="1", price=12), Item(item_id="2", price=14)],
        )
    )
    yield orch
    orch.close()


@pytest.fixture
def wallet():
    return Wallet("shivank", 100)


@pytest.fixture
def email():
    return EmailChannel("shivank@gmail.com")


@pytest.fixture
def customer(orchestrator, wallet, email):
    """User "1" at (1, 2) with a wallet of 100 and an email channel attached."""
    orchestrator.register_user(User(id="1", name="Shivank", location=Location(x=1, y=2)))
    orchestrator.attach_payment("1", wallet)
    orchestrator.attach_notification("1", email)
    return "1"
