"""In-memory restaurant catalogue keyed by restaurant id."""

from threading import RLock

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError

from delivery.catalogue.restaurant import Restaurant

logger = structlog.get_logger(__name__)


class Catalogue:
    def __init__(self) -> None:
        self._restaurants: dict[str, Restaurant] = {}
        self._lock = RLock()

    def add(self, restaurant: Restaurant) -> None:
        restaurant_id = str(restaurant.id)
        with self._lock:
            if restaurant_id in self._restaurants:
                raise ValidationError({"restaurant_id": [f"Restaurant {restaurant_id} is already listed"]})
            self._restaurants[restaurant_id] = restaurant
        logger.info("Restaurant listed", restaurant_id=restaurant_id, menu_size=len(restaurant.menu_items))

    def get(self, restaurant_id: str) -> Restaurant:
        with self._lock:
            restaurant = self._restaurants.get(str(restaurant_id))
        if restaurant is None:
            raise ObjectNotFoundError({"_entity": f"Restaurant {restaurant_id} not found"})
        return restaurant

    def __contains__(self, restaurant_id) -> bool:
        with self._lock:
            return str(restaurant_id) in self._restaurants

    def __len__(self) -> int:
        with self._lock:
            return len(self._restaurants)
