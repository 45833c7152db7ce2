"""Location model"""
import math
from typing import Dict, Any


class Location:
    """A latitude/longitude pair"""

    def __init__(self, lat: float, lng: float):
        self.lat = float(lat)
        self.lng = float(lng)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Location':
        """Build from a persisted {'lat': .., 'lng': ..} record"""
        return cls(data['lat'], data['lng'])

    def distance_to(self, other: 'Location') -> float:
        """Euclidean distance in coordinate-degree space"""
        return math.hypot(other.lat - self.lat, other.lng - self.lng)

    def step_toward(self, other: 'Location', fraction: float) -> 'Location':
        """Move `fraction` of the remaining distance toward `other` on each axis"""
        return Location(
            self.lat + (other.lat - self.lat) * fraction,
            self.lng + (other.lng - self.lng) * fraction,
        )

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary"""
        return {'lat': self.lat, 'lng': self.lng}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Location):
            return NotImplemented
        return self.lat == other.lat and self.lng == other.lng

    def __repr__(self) -> str:
        return f"Location({self.lat:.6f}, {self.lng:.6f})"
