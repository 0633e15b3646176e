from dataclasses import dataclass, field
from typing import List, Optional


# One row of the PHIVOLCS latest earthquakes table
@dataclass(frozen=True)
class EarthquakeSummary:
    date: str
    magnitude: float
    latitude: Optional[float]
    longitude: Optional[float]
    depth: str
    location: str
    details_url: Optional[str] = None

    def to_dict(self):
        return {
            "date": self.date,
            "magnitude": self.magnitude,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "depth": self.depth,
            "location": self.location,
            "detailsUrl": self.details_url,
        }


@dataclass(frozen=True)
class LatestEarthquakes:
    data: List[EarthquakeSummary] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.data)

    def to_dict(self):
        return {
            "count": self.count,
            "data": [earthquake.to_dict() for earthquake in self.data],
        }


# Decomposed "015 km N 28° W of Place" epicenter description
@dataclass(frozen=True)
class Epicenter:
    distance: str
    direction: str
    place: str

    def to_dict(self):
        return {
            "distance": self.distance,
            "direction": self.direction,
            "place": self.place,
        }


# Label/value fields of a single earthquake information page
@dataclass(frozen=True)
class EarthquakeDetail:
    url: str
    date_time: Optional[str] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    epicenter: Optional[Epicenter] = None
    depth: Optional[str] = None
    magnitude: Optional[str] = None
    expecting_damage: Optional[str] = None
    expecting_aftershocks: Optional[str] = None
    issued_on: Optional[str] = None
    prepared_by: Optional[str] = None
    map_image: Optional[str] = None

    def to_dict(self):
        return {
            "url": self.url,
            "dateTime": self.date_time,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "epicenter": self.epicenter.to_dict() if self.epicenter else None,
            "depth": self.depth,
            "magnitude": self.magnitude,
            "expectingDamage": self.expecting_damage,
            "expectingAftershocks": self.expecting_aftershocks,
            "issuedOn": self.issued_on,
            "preparedBy": self.prepared_by,
            "mapImage": self.map_image,
        }
