"""Multi-floor parking garage with hourly billing and an interactive menu."""

from __future__ import annotations

import itertools
import sys
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, Iterator, Optional, Sequence, Tuple

TOTAL_FLOORS = 5
SPOTS_PER_FLOOR = 100
TOTAL_SPOTS = TOTAL_FLOORS * SPOTS_PER_FLOOR
HOURLY_RATE = 20

_RULE = "=" * 60
_BAR_LENGTH = 20

_MENU = "\n".join(
    [
        "",
        _RULE,
        "PARKING GARAGE MANAGEMENT SYSTEM",
        _RULE,
        "1. Vehicle Entry",
        "2. Vehicle Exit",
        "3. Display Floor Availability",
        "4. Search Vehicle by Plate",
        "5. Exit Program",
        _RULE,
        "Enter your choice (1-5): ",
    ]
)


class ParkingError(Exception):
    """Raised when a garage operation cannot be carried out."""


@dataclass
class ParkingSpot:
    """One spot in the garage; ``plate`` is empty while the spot is free."""

    spot_id: int
    floor: int
    plate: str = ""
    entry_time: Optional[datetime] = None

    @property
    def occupied(self) -> bool:
        return bool(self.plate)


@dataclass(frozen=True)
class ExitReceipt:
    """What a departing vehicle is charged and where it was parked."""

    plate: str
    floor: int
    spot_id: int
    hours: int
    minutes: int
    fee: int


def _split_duration(elapsed: timedelta) -> Tuple[int, int]:
    total = elapsed.total_seconds()
    return int(total / 3600), int(total / 60) % 60


def compute_fee(elapsed: timedelta) -> int:
    """Fee for a stay: every started hour is billed, with a one-hour minimum."""
    hours, minutes = _split_duration(elapsed)
    billed = hours
    if minutes > 0 or billed == 0:
        billed += 1
    return billed * HOURLY_RATE


class ParkingGarage:
    """A garage of ``TOTAL_FLOORS`` floors with ``SPOTS_PER_FLOOR`` spots each."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        self.clock = clock
        self._floors = [
            [ParkingSpot(spot_id=number, floor=floor) for number in range(1, SPOTS_PER_FLOOR + 1)]
            for floor in range(1, TOTAL_FLOORS + 1)
        ]
        # Per floor, the lowest index that may still be free.
        self._nearest = [0] * TOTAL_FLOORS

    def _spots(self) -> Iterator[ParkingSpot]:
        return itertools.chain.from_iterable(self._floors)

    def _locate(self, plate: str) -> Optional[ParkingSpot]:
        key = plate.upper()
        return next(
            (spot for spot in self._spots() if spot.occupied and spot.plate.upper() == key),
            None,
        )

    @staticmethod
    def _require_plate(plate: str) -> None:
        if not plate.strip():
            raise ParkingError("vehicle plate cannot be empty")

    def park(self, floor: int, plate: str) -> ParkingSpot:
        """Park a vehicle in the nearest free spot of the requested floor."""
        if not 1 <= floor <= TOTAL_FLOORS:
            raise ParkingError(
                f"invalid floor: {floor}. Floors range from 1 to {TOTAL_FLOORS}"
            )
        self._require_plate(plate)
        existing = self._locate(plate)
        if existing is not None:
            raise ParkingError(
                f"vehicle {plate} is already parked at Floor {existing.floor}, "
                f"Spot {existing.spot_id}"
            )
        spots = self._floors[floor - 1]
        start = self._nearest[floor - 1]
        for index, spot in enumerate(spots[start:], start):
            if not spot.occupied:
                spot.plate = plate
                spot.entry_time = self.clock()
                self._nearest[floor - 1] = index + 1
                return spot
        raise ParkingError(f"no available spots on Floor {floor}")

    def depart(self, plate: str) -> ExitReceipt:
        """Remove a vehicle and bill it for its stay."""
        self._require_plate(plate)
        spot = self._locate(plate)
        if spot is None:
            raise ParkingError(f"vehicle {plate} not found in parking garage")
        elapsed = self.clock() - spot.entry_time
        hours, minutes = _split_duration(elapsed)
        receipt = ExitReceipt(
            plate=plate,
            floor=spot.floor,
            spot_id=spot.spot_id,
            hours=hours,
            minutes=minutes,
            fee=compute_fee(elapsed),
        )
        spot.plate = ""
        spot.entry_time = None
        index = spot.spot_id - 1
        if index < self._nearest[spot.floor - 1]:
            self._nearest[spot.floor - 1] = index
        return receipt

    def find(self, plate: str) -> ParkingSpot:
        """Return the spot a vehicle is parked in."""
        self._require_plate(plate)
        spot = self._locate(plate)
        if spot is None:
            raise ParkingError(f"vehicle {plate} is not currently parked in the garage")
        return spot

    def floor_availability(self) -> Dict[int, int]:
        """Number of free spots on each floor, keyed by floor number."""
        return {
            floor: sum(not spot.occupied for spot in spots)
            for floor, spots in enumerate(self._floors, 1)
        }


def render_availability(garage: ParkingGarage) -> str:
    """Floor-by-floor status report with occupancy bars."""
    lines = ["", _RULE, "PARKING GARAGE STATUS", _RULE]
    availability = garage.floor_availability()
    for floor, available in availability.items():
        occupied = SPOTS_PER_FLOOR - available
        percentage = occupied * 100 // SPOTS_PER_FLOOR
        filled = percentage * _BAR_LENGTH // 100
        bar = "[" + "█" * filled + "░" * (_BAR_LENGTH - filled) + "]"
        lines.append(
            f"Floor {floor}: {available:3d}/{SPOTS_PER_FLOOR} available | {bar} {percentage}%"
        )
    total_available = sum(availability.values())
    lines.append("-" * 60)
    lines.append(
        f"TOTAL: {total_available}/{TOTAL_SPOTS} available | "
        f"{TOTAL_SPOTS - total_available} occupied"
    )
    lines.append(_RULE)
    lines.append("")
    return "\n".join(lines)


def _read() -> Optional[str]:
    line = sys.stdin.readline()
    if line == "":
        return None
    return line.strip()


def _prompt(text: str) -> str:
    print(text, end="", flush=True)
    return _read() or ""


def _handle_entry(garage: ParkingGarage) -> None:
    floor_text = _prompt(f"Enter floor number (1-{TOTAL_FLOORS}): ")
    try:
        floor = int(floor_text)
    except ValueError:
        print("❌ Invalid floor number")
        return
    plate = _prompt("Enter vehicle plate number: ")
    spot = garage.park(floor, plate)
    print(f"✓ Vehicle {plate} parked at Floor {spot.floor}, Spot {spot.spot_id}")


def _handle_exit(garage: ParkingGarage) -> None:
    plate = _prompt("Enter vehicle plate number: ")
    receipt = garage.depart(plate)
    print(
        f"✓ Vehicle {plate} exited. Duration: {receipt.hours}h {receipt.minutes}m. "
        f"Fee: ₹{receipt.fee}"
    )
    print(f"  (Vacated from Floor {receipt.floor}, Spot {receipt.spot_id})")


def _handle_search(garage: ParkingGarage) -> None:
    plate = _prompt("Enter vehicle plate number: ")
    spot = garage.find(plate)
    hours, minutes = _split_duration(garage.clock() - spot.entry_time)
    print(f"\n✓ Found Vehicle: {plate}")
    print(f"  Location: Floor {spot.floor}, Spot {spot.spot_id}")
    print(f"  Entry Time: {spot.entry_time:%Y-%m-%d %H:%M:%S}")
    print(f"  Duration: {hours}h {minutes}m\n")


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Run the interactive garage menu on standard input and output."""
    garage = ParkingGarage()
    actions = {
        "1": _handle_entry,
        "2": _handle_exit,
        "3": lambda g: print(render_availability(g)),
        "4": _handle_search,
    }

    print("\nWelcome to Parking Garage Management System!")
    print(f"Capacity: {TOTAL_SPOTS} spots across {TOTAL_FLOORS} floors")
    print(f"Rate: ₹{HOURLY_RATE} per hour")

    while True:
        print(_MENU, end="", flush=True)
        choice = _read()
        if choice is None or choice == "5":
            print("\n✓ Thank you for using Parking Garage Management System!")
            print("Exiting...")
            return
        action = actions.get(choice)
        if action is None:
            print("❌ Invalid choice. Please select 1-5.")
            continue
        try:
            action(garage)
        except ParkingError as exc:
            print(f"❌ {exc}")


if __name__ == "__main__":
    main()