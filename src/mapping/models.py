"""Domain types for project items, location terms and map markers."""
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Coordinates:
    lat: Optional[float] = None
    lng: Optional[float] = None

    @property
    def is_complete(self) -> bool:
        return self.lat is not None and self.lng is not None


@dataclass(frozen=True)
class LocationTerm:
    """A hierarchical location tag (country, state, region) with optional geodata."""

    id: int
    name: str
    slug: str
    parent_id: Optional[int] = None
    coordinates: Coordinates = field(default_factory=Coordinates)


@dataclass(frozen=True)
class ContentItem:
    """A project record tagged with zero or more location terms.

    id, title and permalink are Optional so that records from an
    incomplete snapshot can still be represented and reported as skipped.
    """

    id: Optional[int]
    title: Optional[str]
    permalink: Optional[str]
    terms: tuple[LocationTerm, ...] = ()
    classification: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.id is not None and bool(self.title) and bool(self.permalink)


@dataclass(frozen=True)
class ItemLink:
    title: str
    permalink: str


@dataclass
class MarkerEntry:
    """Per-location summary for map display.

    first_item_id is the id of the first item seen under this location.
    It is not the location's id.
    """

    location_id: int
    location_name: str
    coordinates: Coordinates
    first_item_id: int
    items: dict[int, ItemLink] = field(default_factory=dict)

    @property
    def item_count(self) -> int:
        return len(self.items)


MarkerDataset = dict[int, MarkerEntry]


@dataclass(frozen=True)
class AggregationResult:
    dataset: MarkerDataset
    skipped: int = 0
