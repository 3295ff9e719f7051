"""Shared-location roster parsing.

The roster endpoint answers with a JSON array wrapped in anti-scraping
framing: the first and the last line of the body are not JSON. The interior
lines, joined, are one JSON array whose first element lists one record per
person sharing their location with the account.

Positions inside a record are fixed but undocumented:

- ``record[0][0]`` subject id
- ``record[0][1]`` photo URL
- ``record[0][3]`` display name
- ``record[1][1][1]`` longitude
- ``record[1][1][2]`` latitude
"""

import json
import time
from dataclasses import asdict, dataclass
from logging import getLogger
from typing import Any

from .errors import ExtractionFailure

logger = getLogger(__name__)


@dataclass
class LocationRecord:
    """Location of one person on the roster.

    Args:
        timestamp: Seconds since epoch at which the roster was parsed
        id: Provider identifier of the person
        name: Display name
        photo_url: URL of the profile photo
        latitude: Latitude in degrees
        longitude: Longitude in degrees
    """

    timestamp: int
    id: str
    name: str
    photo_url: str
    latitude: float
    longitude: float

    def as_row(self) -> tuple:
        """Fields in output order: timestamp, id, lat, long, name, photoURL."""
        return (
            self.timestamp,
            self.id,
            self.latitude,
            self.longitude,
            self.name,
            self.photo_url,
        )

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def strip_framing(text: str) -> str:
    """Drop the first and last line of the body and join the rest."""
    return "".join(text.split("\n")[1:-1])


def extract_user_location(entry: Any, timestamp: int) -> LocationRecord:
    """Map one positional roster entry to a LocationRecord.

    Raises:
        ExtractionFailure: If the entry lacks one of the expected positions
    """
    try:
        person, position = entry[0], entry[1][1]
        return LocationRecord(
            timestamp=timestamp,
            id=person[0],
            photo_url=person[1],
            name=person[3],
            longitude=position[1],
            latitude=position[2],
        )
    except (IndexError, KeyError, TypeError) as e:
        raise ExtractionFailure(f"Malformed roster entry: {e}") from e


def parse_location_data(data: Any, now: int | None = None) -> list[LocationRecord]:
    """Parse decoded roster JSON into LocationRecords.

    A missing or empty roster yields no records. Malformed entries are
    skipped with a warning and the remaining ones are returned.

    Raises:
        ExtractionFailure: If the roster is present but not a list
    """
    timestamp = int(time.time()) if now is None else now
    try:
        entries = data[0]
    except (IndexError, KeyError, TypeError):
        entries = None
    if not entries:
        logger.info("No shared locations found")
        return []
    if not isinstance(entries, list):
        raise ExtractionFailure(f"Roster is not a list: {type(entries).__name__}")

    records = []
    for index, entry in enumerate(entries):
        try:
            records.append(extract_user_location(entry, timestamp))
        except ExtractionFailure as e:
            logger.warning(f"Skipping roster entry {index}: {e}")
    logger.debug(f"Parsed {len(records)} of {len(entries)} roster entries")
    return records


def parse_roster_response(text: str, now: int | None = None) -> list[LocationRecord]:
    """Parse a framed roster response body.

    Raises:
        ExtractionFailure: If the unframed body is not valid JSON
    """
    try:
        data = json.loads(strip_framing(text))
    except ValueError as e:
        prefix = text[:50]
        raise ExtractionFailure(
            f"Invalid roster response format: {e}; body starts with {prefix!r}"
        ) from e
    return parse_location_data(data, now)
