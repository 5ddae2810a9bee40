"""Persistence helpers."""

from .trip_store import JsonTripStore, partition_trips, refresh_statuses

__all__ = ["JsonTripStore", "partition_trips", "refresh_statuses"]
