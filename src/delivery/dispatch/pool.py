"""Rider pool: nearest-available rider matching.

Riders are kept in registration order. ``match_nearest`` scans them under a
pool-wide lock and claims the winner before releasing it, so two concurrent
orders can never be handed the same rider.
"""

import math
from dataclasses import dataclass
from threading import RLock

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError

from delivery.dispatch.rider import Rider
from delivery.errors import FailureKind, RiderError
from delivery.shared.location import Location

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RiderAssignment:
    """Handle returned for a successful match."""

    rider_id: str
    rider_location: Location
    target: Location
    distance: float


class RiderPool:
    def __init__(self) -> None:
        self._riders: dict[str, Rider] = {}
        self._lock = RLock()

    def register(self, rider: Rider) -> None:
        rider_id = str(rider.id)
        with self._lock:
            if rider_id in self._riders:
                raise ValidationError({"rider_id": [f"Rider {rider_id} is already registered"]})
            self._riders[rider_id] = rider
        logger.info("Rider registered", rider_id=rider_id, status=rider.status)

    def get(self, rider_id: str) -> Rider:
        with self._lock:
            rider = self._riders.get(str(rider_id))
        if rider is None:
            raise ObjectNotFoundError({"_entity": f"Rider {rider_id} not found"})
        return rider

    def update_location(self, rider_id: str, location: Location) -> None:
        with self._lock:
            self.get(rider_id).update_location(location)

    def match_nearest(self, target: Location) -> RiderAssignment:
        """Claim the assignable rider closest to ``target``.

        Riders that are unavailable or have never reported a location are
        skipped. On equal distances the earliest-registered rider wins.

        Raises:
            RiderError: NO_RIDER_AVAILABLE when no rider is assignable.
        """
        with self._lock:
            chosen = None
            best = math.inf
            for rider in self._riders.values():
                if not rider.is_assignable():
                    continue
                distance = rider.location.distance_to(target)
                if distance < best:
                    chosen, best = rider, distance

            if chosen is None:
                logger.warning("No rider available", target_x=target.x, target_y=target.y, pool_size=len(self._riders))
                raise RiderError(FailureKind.NO_RIDER_AVAILABLE, "No available rider with a known location")

            chosen.accept_delivery(target)
            assignment = RiderAssignment(
                rider_id=str(chosen.id),
                rider_location=chosen.location,
                target=target,
                distance=best,
            )

        logger.info("Rider matched", rider_id=assignment.rider_id, distance=round(best, 3))
        return assignment

    def complete_delivery(self, rider_id: str) -> None:
        """Return a matched rider to the pool."""
        with self._lock:
            self.get(rider_id).complete_delivery()
        logger.info("Rider released", rider_id=str(rider_id))

    def available_count(self) -> int:
        with self._lock:
            return sum(1 for r in self._riders.values() if r.is_assignable())

    def __contains__(self, rider_id) -> bool:
        with self._lock:
            return str(rider_id) in self._riders

    def __len__(self) -> int:
        with self._lock:
            return len(self._riders)
