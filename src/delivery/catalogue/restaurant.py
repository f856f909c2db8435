"""Restaurant aggregate with its priced menu.

Restaurants are created once and are read-only afterwards: the checkout
saga only ever looks up menu prices.
"""

from protean.exceptions import ValidationError
from protean.fields import HasMany, Identifier, Integer, String, ValueObject

from delivery.domain import delivery
from delivery.shared.location import Location


@delivery.value_object
class Item:
    """A sellable item and its price in whole currency units."""

    item_id = String(required=True, max_length=50)
    price = Integer(required=True, min_value=0)


@delivery.entity(part_of="Restaurant")
class MenuItem:
    item_id = String(required=True, max_length=50)
    price = Integer(required=True, min_value=0)


@delivery.aggregate
class Restaurant:
    id = Identifier(identifier=True)
    name = String(required=True, max_length=255)
    location = ValueObject(Location, required=True)
    menu_items = HasMany(MenuItem)

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, restaurant_id, name, location, items):
        """Create a restaurant with a menu built from ``Item`` value objects.

        Raises ``ValidationError`` when two items share an id.
        """
        seen = set()
        for item in items:
            if item.item_id in seen:
                raise ValidationError({"menu": [f"Duplicate menu item {item.item_id}"]})
            seen.add(item.item_id)

        restaurant = cls(id=restaurant_id, name=name, location=location)
        for item in items:
            restaurant.add_menu_items(MenuItem(item_id=item.item_id, price=item.price))
        return restaurant

    # -------------------------------------------------------------------
    # Menu lookup
    # -------------------------------------------------------------------
    def price_of(self, item_id: str) -> int | None:
        """Price of ``item_id`` or None when the item is not on the menu."""
        entry = next((m for m in self.menu_items if m.item_id == item_id), None)
        return entry.price if entry else None
