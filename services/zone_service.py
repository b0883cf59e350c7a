"""
Session zone registry.

Zone sources (place search, manual pins, geocoded addresses, imported
boundary files) all normalize to Zone before they reach the registry.
Provider failures never modify the registry.
"""

from typing import Callable, Iterable, NamedTuple, Optional, Sequence
from uuid import uuid4
import structlog

from config import settings
from models.geo import Position, Zone, ZoneOrigin
from services.geo_math import is_valid_position
from exceptions import (
    ExternalServiceError,
    InvalidCoordinateError,
    InvalidZoneError,
    ZoneNotFoundError,
)

logger = structlog.get_logger(__name__)


class PlaceHit(NamedTuple):
    """One result returned by a place-search or geocoding provider."""
    label: str
    lat: float
    lng: float


PlaceProvider = Callable[[str], Iterable[PlaceHit]]


def _new_zone_id(origin: ZoneOrigin) -> str:
    return f"{origin.value}-{uuid4().hex[:12]}"


class ZoneRegistry:
    """
    Ordered, mutable list of zones for one editing session.

    Discarded with the session; never persisted.
    """

    def __init__(self, zones: Optional[Sequence[Zone]] = None):
        self._zones: list[Zone] = []
        if zones:
            self.add_many(zones)

    @property
    def zones(self) -> tuple[Zone, ...]:
        """Snapshot of the current zones, in insertion order."""
        return tuple(self._zones)

    def __len__(self) -> int:
        return len(self._zones)

    def __contains__(self, zone_id: str) -> bool:
        return any(z.id == zone_id for z in self._zones)

    # ===================
    # ADD
    # ===================

    def add(self, zone: Zone) -> Zone:
        """
        Register a zone.

        Raises:
            InvalidZoneError: If a zone with the same id exists
        """
        self._check_new([zone])
        self._zones.append(zone)
        logger.info("zone_added", zone_id=zone.id, origin=zone.origin.value, radius_m=zone.radius_m)
        return zone

    def add_many(self, zones: Sequence[Zone]) -> list[Zone]:
        """
        Register several zones at once (e.g. an imported boundary file).

        All or nothing: on a duplicate id no zone is added.
        """
        zones = list(zones)
        self._check_new(zones)
        self._zones.extend(zones)
        logger.info("zones_added", count=len(zones))
        return zones

    def add_pin(
        self,
        lat: float,
        lng: float,
        label: Optional[str] = None,
        radius_m: Optional[float] = None,
        origin: ZoneOrigin = ZoneOrigin.MANUAL_PIN,
    ) -> Zone:
        """
        Register a zone from raw coordinates.

        Args:
            lat: Center latitude
            lng: Center longitude
            label: Display label (defaults to "Pin lat, lng")
            radius_m: Radius in meters (defaults to settings)
            origin: Zone source

        Raises:
            InvalidCoordinateError: If the coordinates are not usable
        """
        if lat is None or lng is None:
            raise InvalidCoordinateError(lat, lng)
        center = Position(lat=lat, lng=lng)
        if not is_valid_position(center):
            raise InvalidCoordinateError(lat, lng)

        zone = Zone(
            id=_new_zone_id(origin),
            center=center,
            radius_m=radius_m if radius_m is not None else settings.default_zone_radius_m,
            label=label or f"Pin {lat:.4f}, {lng:.4f}",
            origin=origin,
        )
        return self.add(zone)

    def add_from_provider(
        self,
        provider: PlaceProvider,
        query: str,
        origin: ZoneOrigin = ZoneOrigin.SEARCH_RESULT,
        radius_m: Optional[float] = None,
    ) -> list[Zone]:
        """
        Turn provider hits into zones.

        Hits with unusable coordinates are skipped. Search results are capped
        at settings.max_search_results. No retry is attempted.

        Args:
            provider: Place search or geocoder callable
            query: Text passed to the provider
            origin: Origin recorded on the new zones
            radius_m: Radius for every new zone (defaults to settings)

        Returns:
            Zones added (possibly empty)

        Raises:
            ExternalServiceError: If the provider fails; registry unchanged
        """
        logger.info("zone_provider_search", query=query, origin=origin.value)

        try:
            hits = list(provider(query))
        except Exception as e:
            logger.error("zone_provider_failed", query=query, error=str(e))
            raise ExternalServiceError("places", str(e), details={"query": query})

        radius = radius_m if radius_m is not None else settings.default_zone_radius_m
        zones: list[Zone] = []
        for hit in hits:
            center = None
            if hit.lat is not None and hit.lng is not None:
                center = Position(lat=hit.lat, lng=hit.lng)
            if not is_valid_position(center):
                logger.warning("zone_hit_skipped", label=hit.label, lat=hit.lat, lng=hit.lng)
                continue
            zones.append(Zone(
                id=_new_zone_id(origin),
                center=center,
                radius_m=radius,
                label=hit.label or query,
                origin=origin,
            ))
            if len(zones) >= settings.max_search_results:
                break

        if zones:
            self.add_many(zones)
        return zones

    # ===================
    # UPDATE / REMOVE
    # ===================

    def update_radius(self, zone_id: str, radius_m: float) -> Zone:
        """Replace a zone with a copy using a new radius."""
        if radius_m <= 0:
            raise InvalidZoneError("Radius must be positive", details={"radius_m": radius_m})
        idx = self._index_of(zone_id)
        updated = Zone(**{**self._zones[idx].model_dump(), "radius_m": radius_m})
        self._zones[idx] = updated
        logger.info("zone_radius_updated", zone_id=zone_id, radius_m=radius_m)
        return updated

    def remove(self, zone_id: str) -> Zone:
        """
        Remove a zone.

        Raises:
            ZoneNotFoundError: If no zone has that id
        """
        removed = self._zones.pop(self._index_of(zone_id))
        logger.info("zone_removed", zone_id=zone_id)
        return removed

    def clear(self) -> None:
        """Remove every zone."""
        count = len(self._zones)
        self._zones = []
        logger.info("zones_cleared", count=count)

    # ===================
    # HELPERS
    # ===================

    def _index_of(self, zone_id: str) -> int:
        for idx, zone in enumerate(self._zones):
            if zone.id == zone_id:
                return idx
        raise ZoneNotFoundError(zone_id)

    def _check_new(self, zones: Sequence[Zone]) -> None:
        seen = {z.id for z in self._zones}
        for zone in zones:
            if zone.id in seen:
                raise InvalidZoneError(
                    "Zone id already registered",
                    details={"zone_id": zone.id}
                )
            seen.add(zone.id)
