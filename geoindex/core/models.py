"""
GeoIndex Models
===============

Dataclasses for indexed locations, entity references and search results.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List
from uuid import UUID

from .errors import InvalidCoordinateError, InvalidVersionError
from .versions import is_time_uuid, new_time_uuid

# Geographic coordinate bounds
MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0


def validate_coordinates(latitude: float, longitude: float) -> None:
    """Validate both latitude and longitude."""
    if not (MIN_LATITUDE <= latitude <= MAX_LATITUDE):
        raise InvalidCoordinateError(
            f"Latitude must be between {MIN_LATITUDE} and {MAX_LATITUDE}, got {latitude}"
        )
    if not (MIN_LONGITUDE <= longitude <= MAX_LONGITUDE):
        raise InvalidCoordinateError(
            f"Longitude must be between {MIN_LONGITUDE} and {MAX_LONGITUDE}, got {longitude}"
        )


@dataclass(frozen=True)
class Point:
    """A latitude/longitude pair in decimal degrees."""
    latitude: float
    longitude: float

    def __post_init__(self):
        validate_coordinates(self.latitude, self.longitude)


@dataclass(frozen=True)
class EntityRef:
    """Generic reference to an entity, handed to hydration."""
    uuid: UUID
    type: str


@dataclass(frozen=True)
class LocationRecord:
    """
    One indexed location of an entity.

    Attributes:
        entity_id: UUID of the referenced entity
        entity_type: Entity kind (e.g. "user", "store")
        latitude: Latitude in [-90, 90]
        longitude: Longitude in [-180, 180]
        version_id: Time UUID ordering successive updates of the entity;
                    a fresh one is minted when not given
    """
    entity_id: UUID
    entity_type: str
    latitude: float
    longitude: float
    version_id: UUID = field(default_factory=new_time_uuid)

    def __post_init__(self):
        validate_coordinates(self.latitude, self.longitude)
        if not is_time_uuid(self.version_id):
            raise InvalidVersionError(
                f"version_id must be a time UUID (version 1), got version {self.version_id.version}"
            )

    @property
    def point(self) -> Point:
        return Point(self.latitude, self.longitude)

    def to_ref(self) -> EntityRef:
        return EntityRef(uuid=self.entity_id, type=self.entity_type)

    def __repr__(self) -> str:
        return (
            f"<LocationRecord({self.entity_type}:{str(self.entity_id)[:8]}..., "
            f"lat={self.latitude}, lon={self.longitude}, "
            f"version={str(self.version_id)[:8]}...)>"
        )


class ResultLevel(str, Enum):
    """How much of each entity hydration should load."""
    IDS = "ids"
    REFS = "refs"
    CORE_PROPERTIES = "core_properties"
    ALL_PROPERTIES = "all_properties"
    LINKED_PROPERTIES = "linked_properties"


@dataclass
class SearchResults:
    """
    Result of a proximity search after hydration.

    Attributes:
        refs: Entity references in result order
        level: Result level the entities were loaded at
        entities: Hydrated entities (empty for IDS/REFS)
    """
    refs: List[EntityRef] = field(default_factory=list)
    level: ResultLevel = ResultLevel.REFS
    entities: List[Any] = field(default_factory=list)

    @property
    def ids(self) -> List[UUID]:
        return [ref.uuid for ref in self.refs]

    def __len__(self) -> int:
        return len(self.refs)
