"""JSON-file persistence for booked trips."""
from __future__ import annotations

import asyncio
import json
import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple

from stay_search.booking.simulate import Trip, TripStatus

logger = logging.getLogger(__name__)


def refresh_statuses(trips: Iterable[Trip], today: date) -> List[Trip]:
    """Mark upcoming trips whose check-out date has passed as ``past``."""
    refreshed: List[Trip] = []
    for trip in trips:
        if trip.status is TripStatus.UPCOMING and trip.check_out < today:
            trip = trip.with_status(TripStatus.PAST)
        refreshed.append(trip)
    return refreshed


def partition_trips(trips: Iterable[Trip], today: date) -> Tuple[List[Trip], List[Trip]]:
    """Split into (upcoming by check-in ascending, past or cancelled by check-in descending)."""
    upcoming: List[Trip] = []
    past: List[Trip] = []
    for trip in refresh_statuses(trips, today):
        if trip.status is TripStatus.UPCOMING:
            upcoming.append(trip)
        else:
            past.append(trip)
    upcoming.sort(key=lambda trip: trip.check_in)
    past.sort(key=lambda trip: trip.check_in, reverse=True)
    return upcoming, past


class JsonTripStore:
    """Ordered collection of trip records keyed by id, stored in one JSON file."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    async def list_trips(self) -> List[Trip]:
        async with self._lock:
            return await asyncio.to_thread(self._read)

    async def get_trip(self, trip_id: str) -> Optional[Trip]:
        for trip in await self.list_trips():
            if trip.id == trip_id:
                return trip
        return None

    async def save_trip(self, trip: Trip) -> None:
        async with self._lock:
            trips = await asyncio.to_thread(self._read)
            if any(existing.id == trip.id for existing in trips):
                raise ValueError(f"Trip '{trip.id}' already exists")
            trips.append(trip)
            await asyncio.to_thread(self._write, trips)
        logger.info("Saved trip %s", trip.id)

    async def update_trip(self, trip: Trip) -> None:
        async with self._lock:
            trips = await asyncio.to_thread(self._read)
            for index, existing in enumerate(trips):
                if existing.id == trip.id:
                    trips[index] = trip
                    break
            else:
                raise KeyError(f"Trip '{trip.id}' not found")
            await asyncio.to_thread(self._write, trips)

    async def delete_trip(self, trip_id: str) -> bool:
        async with self._lock:
            trips = await asyncio.to_thread(self._read)
            remaining = [trip for trip in trips if trip.id != trip_id]
            if len(remaining) == len(trips):
                return False
            await asyncio.to_thread(self._write, remaining)
        logger.info("Deleted trip %s", trip_id)
        return True

    async def cancel_trip(self, trip_id: str) -> Trip:
        trip = await self.get_trip(trip_id)
        if trip is None:
            raise KeyError(f"Trip '{trip_id}' not found")
        cancelled = trip.with_status(TripStatus.CANCELLED)
        await self.update_trip(cancelled)
        return cancelled

    def _read(self) -> List[Trip]:
        if not self._path.exists():
            return []
        try:
            data: Any = json.loads(self._path.read_text())
        except json.JSONDecodeError:
            logger.exception("Trip store %s is corrupt; treating it as empty", self._path)
            return []
        items = data.get("items", []) if isinstance(data, dict) else data
        if not isinstance(items, list):
            logger.error("Trip store %s has no item list; treating it as empty", self._path)
            return []

        trips: List[Trip] = []
        for index, item in enumerate(items):
            try:
                trips.append(Trip.from_record(item))
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping unreadable trip record %s in %s: %r", index, self._path, exc)
        return trips

    def _write(self, trips: List[Trip]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        serialisable = {
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "items": [trip.to_record() for trip in trips],
        }
        self._path.write_text(json.dumps(serialisable, indent=2))
