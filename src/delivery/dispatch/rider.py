"""Rider aggregate: a delivery rider's location and availability.

State Machine:
    AVAILABLE → UNAVAILABLE (matched to a drop-off target)
    UNAVAILABLE → AVAILABLE (delivery completed, target cleared)

Location updates never change availability. A rider with no known
location can be registered but is not assignable until its first update.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String, ValueObject

from delivery.domain import delivery
from delivery.shared.location import Location


class RiderStatus(Enum):
    AVAILABLE = "Available"
    UNAVAILABLE = "Unavailable"


_VALID_TRANSITIONS = {
    RiderStatus.AVAILABLE: {RiderStatus.UNAVAILABLE},
    RiderStatus.UNAVAILABLE: {RiderStatus.AVAILABLE},
}


@delivery.aggregate
class Rider:
    id = Identifier(identifier=True)
    location = ValueObject(Location)
    target_location = ValueObject(Location)
    status = String(choices=RiderStatus, default=RiderStatus.AVAILABLE.value)
    assigned_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def available_rider_has_no_target(self):
        if self.status == RiderStatus.AVAILABLE.value and self.target_location is not None:
            raise ValidationError({"target_location": ["An available rider cannot hold a delivery target"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, rider_id, location=None):
        return cls(
            id=rider_id,
            location=location,
            status=RiderStatus.AVAILABLE.value,
            updated_at=datetime.now(UTC),
        )

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status: RiderStatus) -> None:
        current = RiderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def is_available(self) -> bool:
        return RiderStatus(self.status) == RiderStatus.AVAILABLE

    def is_assignable(self) -> bool:
        """Available and with a known location."""
        return self.is_available() and self.location is not None

    # -------------------------------------------------------------------
    # Location
    # -------------------------------------------------------------------
    def update_location(self, location: Location) -> None:
        self.location = location
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Assignment
    # -------------------------------------------------------------------
    def accept_delivery(self, target: Location) -> None:
        """Claim this rider for a drop-off at ``target``."""
        self._assert_can_transition(RiderStatus.UNAVAILABLE)
        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = RiderStatus.UNAVAILABLE.value
            self.target_location = target
            self.assigned_at = now
            self.updated_at = now

    def complete_delivery(self) -> None:
        """Release the rider back to the pool after a drop-off."""
        self._assert_can_transition(RiderStatus.AVAILABLE)
        with atomic_change(self):
            self.target_location = None
            self.assigned_at = None
            self.status = RiderStatus.AVAILABLE.value
            self.updated_at = datetime.now(UTC)
