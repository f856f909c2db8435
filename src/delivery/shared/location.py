"""Location value object shared by customers, restaurants and riders."""

import math

from protean.fields import Float

from delivery.domain import delivery


@delivery.value_object
class Location:
    """A point on the delivery grid.

    Immutable; two locations with the same coordinates are equal.
    """

    x = Float(required=True)
    y = Float(required=True)

    def distance_to(self, other: "Location") -> float:
        """Euclidean distance to ``other``. Symmetric, zero iff the points coincide."""
        return math.hypot(self.x - other.x, self.y - other.y)
