"""End-to-end order fulfillment: two customers, one restaurant, two riders."""

import pytest
from delivery.catalogue.restaurant import Item, Restaurant
from delivery.customers.user import User
from delivery.dispatch.rider import Rider
from delivery.errors import FailureKind, RiderError
from delivery.notifications.email import EmailChannel
from delivery.ordering.checkout.orchestrator import OrderOrchestrator
from delivery.payments.wallet import Wallet
from delivery.shared.location import Location


@pytest.fixture
def platform():
    orchestrator = OrderOrchestrator()
    orchestrator.add_restaurant(
        Restaurant.create(
            restaurant_id="1",
            name="Karnot Dhaba",
            location=Location(x=1, y=1),
            items=[Item(item_id="1", price=12), Item(item_id="2", price=14)],
        )
    )

    orchestrator.register_user(User(id="1", name="Shivank", location=Location(x=1, y=2)))
    orchestrator.attach_notification("1", EmailChannel("shivank@gmail.com"))
    orchestrator.attach_payment("1", Wallet("shivank", 100))

    orchestrator.register_user(User(id="2", name="Ajay", location=Location(x=1, y=3)))
    orchestrator.attach_notification("2", EmailChannel("ajay@gmail.com"))
    orchestrator.attach_payment("2", Wallet("ajay", 150))

    orchestrator.register_rider(Rider.create("r1"))
    orchestrator.register_rider(Rider.create("r2"))
    orchestrator.update_rider_location("r1", Location(x=2, y=2))
    orchestrator.update_rider_location("r2", Location(x=3, y=3))

    yield orchestrator
    orchestrator.close()


class TestOrderFulfillmentFlow:
    def test_first_order_gets_nearest_rider(self, platform):
        platform.add_to_cart("1", "1")
        platform.add_to_cart("1", "2")

        receipt = platform.place_order("1", "1")

        assert receipt.total == 26
        assert receipt.rider_id == "r1"
        assert receipt.remaining_balance == 74
        assert platform.payments.get("1").balance == 74
        assert platform.carts.get("1").items() == {}
        assert platform.notifications.get("1").sent_emails[0]["body"] == (
            "Order of ₹26 from Karnot Dhaba processed. Rider r1 assigned. Balance: ₹74"
        )

    def test_second_order_gets_remaining_rider(self, platform):
        platform.add_to_cart("1", "1")
        platform.add_to_cart("1", "2")
        platform.place_order("1", "1")

        platform.add_to_cart("2", "1")
        platform.add_to_cart("2", "1")
        receipt = platform.place_order("2", "1")

        assert receipt.total == 24
        assert receipt.rider_id == "r2"
        assert receipt.remaining_balance == 126

    def test_third_order_without_riders_is_refunded(self, platform):
        platform.add_to_cart("1", "1")
        platform.place_order("1", "1")
        platform.add_to_cart("2", "1")
        platform.place_order("2", "1")

        platform.add_to_cart("1", "2")
        with pytest.raises(RiderError) as exc:
            platform.place_order("1", "1")

        assert exc.value.kind == FailureKind.NO_RIDER_AVAILABLE
        assert platform.payments.get("1").balance == 88
        assert platform.carts.get("1").items() == {"2": 1}

    def test_riders_return_after_delivery(self, platform):
        platform.add_to_cart("1", "1")
        first = platform.place_order("1", "1")
        platform.complete_delivery(first.rider_id)

        assert platform.rider_pool.available_count() == 2
