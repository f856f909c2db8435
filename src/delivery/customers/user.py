"""Customer aggregate: who is ordering and where they are."""

from protean.fields import Identifier, String, ValueObject

from delivery.domain import delivery
from delivery.shared.location import Location


@delivery.aggregate
class User:
    """A customer placing orders.

    Capability registries (cart, payment, notification) refer to a User
    by id only; they never hold the aggregate itself.
    """

    id = Identifier(identifier=True)
    name = String(required=True, max_length=100)
    location = ValueObject(Location, required=True)

    def move_to(self, location: Location) -> None:
        """Replace the customer's current location (used as the drop-off point)."""
        self.location = location
