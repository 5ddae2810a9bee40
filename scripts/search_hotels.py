"""Entry point for manual searches and trip management."""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import date

from stay_search.booking import PaymentDetails, PaymentMethod, simulate_booking
from stay_search.config.settings import Settings
from stay_search.core.errors import StaySearchError
from stay_search.core.logging import configure_logging
from stay_search.storage import JsonTripStore, partition_trips
from stay_search.tasks import SearchCriteria, SearchOrchestrator

logger = logging.getLogger("stay_search.cli")


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}', expected YYYY-MM-DD") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Search hotel inventory and manage simulated trips")
    sub = parser.add_subparsers(dest="command", required=True)

    search = sub.add_parser("search", help="Run an availability search")
    search.add_argument("--destination", required=True, help="Free-text city name")
    search.add_argument("--check-in", type=_parse_date, required=True)
    search.add_argument("--check-out", type=_parse_date, required=True)
    search.add_argument("--guests", type=int, default=1)
    search.add_argument("--location-code", help="Skip location lookup and use this city code")
    search.add_argument("--json", action="store_true", help="Print hotels as JSON")

    book = sub.add_parser("book", help="Search, then simulate booking one of the results")
    book.add_argument("--destination", required=True)
    book.add_argument("--check-in", type=_parse_date, required=True)
    book.add_argument("--check-out", type=_parse_date, required=True)
    book.add_argument("--guests", type=int, default=1)
    book.add_argument("--location-code")
    book.add_argument("--hotel-id", required=True)
    book.add_argument("--method", choices=[method.value for method in PaymentMethod], default="creditCard")
    book.add_argument("--card-number")
    book.add_argument("--expiry")
    book.add_argument("--cvc")
    book.add_argument("--paypal-email")

    suggest = sub.add_parser("suggest", help="List location suggestions for a keyword")
    suggest.add_argument("keyword")

    sub.add_parser("trips", help="List stored trips")

    cancel = sub.add_parser("cancel", help="Cancel a stored trip")
    cancel.add_argument("trip_id")
    return parser


async def _run_search(args: argparse.Namespace, settings: Settings) -> int:
    criteria = SearchCriteria(
        destination=args.destination,
        check_in=args.check_in,
        check_out=args.check_out,
        guests=args.guests,
        location_code=args.location_code,
    )
    async with SearchOrchestrator.from_settings(settings) as orchestrator:
        result = await orchestrator.search(criteria)

    if args.json:
        print(json.dumps([hotel.to_dict() for hotel in result.hotels], indent=2))
        return 0
    if result.zero_results:
        print(f"No bookable hotels found for {args.destination} ({result.location_code}).")
        return 0
    for hotel in result.hotels:
        estimated = " (est.)" if hotel.rating_estimated else ""
        print(
            f"{hotel.id:<10} {hotel.name[:40]:<40} {hotel.rating:.1f}{estimated:<7} "
            f"{hotel.total_price:>10.2f} {hotel.currency}  {hotel.address}"
        )
    return 0


async def _run_book(args: argparse.Namespace, settings: Settings) -> int:
    criteria = SearchCriteria(
        destination=args.destination,
        check_in=args.check_in,
        check_out=args.check_out,
        guests=args.guests,
        location_code=args.location_code,
    )
    async with SearchOrchestrator.from_settings(settings) as orchestrator:
        result = await orchestrator.search(criteria)
    hotel = next((item for item in result.hotels if item.id == args.hotel_id), None)
    if hotel is None:
        print(f"Hotel '{args.hotel_id}' is not in the current results", file=sys.stderr)
        return 1

    payment = PaymentDetails(
        method=PaymentMethod(args.method),
        card_number=args.card_number,
        expiry_date=args.expiry,
        cvc=args.cvc,
        paypal_email=args.paypal_email,
    )
    trip = simulate_booking(hotel, args.check_in, args.check_out, args.guests, payment)
    await JsonTripStore(settings.trips_path).save_trip(trip)
    print(f"Booked {trip.id}: {hotel.name}, {trip.nights} nights, {trip.total_price:.2f} {hotel.currency}")
    return 0


async def _run_suggest(args: argparse.Namespace, settings: Settings) -> int:
    async with SearchOrchestrator.from_settings(settings) as orchestrator:
        candidates = await orchestrator.suggest_locations(args.keyword)
    for candidate in candidates:
        print(f"{candidate.code:<5} {candidate.kind.value:<8} {candidate.label()}")
    return 0


async def _run_trips(settings: Settings) -> int:
    store = JsonTripStore(settings.trips_path)
    upcoming, past = partition_trips(await store.list_trips(), date.today())
    for heading, trips in (("Upcoming", upcoming), ("Past", past)):
        print(f"{heading}:")
        if not trips:
            print("  (none)")
        for trip in trips:
            print(
                f"  {trip.id}  {trip.hotel.name}  {trip.check_in} → {trip.check_out}  "
                f"{trip.total_price:.2f} {trip.hotel.currency}  [{trip.status.value}]"
            )
    return 0


async def _run_cancel(args: argparse.Namespace, settings: Settings) -> int:
    store = JsonTripStore(settings.trips_path)
    try:
        trip = await store.cancel_trip(args.trip_id)
    except KeyError:
        print(f"Trip '{args.trip_id}' not found", file=sys.stderr)
        return 1
    print(f"Cancelled {trip.id}")
    return 0


async def _dispatch(args: argparse.Namespace, settings: Settings) -> int:
    if args.command == "search":
        return await _run_search(args, settings)
    if args.command == "book":
        return await _run_book(args, settings)
    if args.command == "suggest":
        return await _run_suggest(args, settings)
    if args.command == "trips":
        return await _run_trips(settings)
    return await _run_cancel(args, settings)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings()
    settings.ensure_directories()
    configure_logging(settings)
    try:
        return asyncio.run(_dispatch(args, settings))
    except StaySearchError as exc:
        logger.debug("Command failed", exc_info=True)
        print(exc.message, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
