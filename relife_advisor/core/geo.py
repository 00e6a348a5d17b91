"""
Geographic helpers for archetype matching.

Archetype coordinates coming from the forecasting service are not reliable,
so distances are measured to a fixed reference point per country (the
national capital) instead.
"""

import math
from dataclasses import dataclass
from typing import Dict, Optional


EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class Coordinates:
    """WGS84 point in decimal degrees."""
    lat: float
    lng: float


# Capital cities of the EU member states, keyed by the country names used
# in the archetype listing.
COUNTRY_REFERENCE_POINTS: Dict[str, Coordinates] = {
    "Austria": Coordinates(48.21, 16.37),       # Vienna
    "Belgium": Coordinates(50.85, 4.35),        # Brussels
    "Bulgaria": Coordinates(42.7, 23.32),       # Sofia
    "Croatia": Coordinates(45.81, 15.98),       # Zagreb
    "Cyprus": Coordinates(35.17, 33.36),        # Nicosia
    "Czechia": Coordinates(50.08, 14.44),       # Prague
    "Denmark": Coordinates(55.68, 12.57),       # Copenhagen
    "Estonia": Coordinates(59.44, 24.75),       # Tallinn
    "Finland": Coordinates(60.17, 24.94),       # Helsinki
    "France": Coordinates(48.86, 2.35),         # Paris
    "Germany": Coordinates(52.52, 13.41),       # Berlin
    "Greece": Coordinates(37.98, 23.73),        # Athens
    "Hungary": Coordinates(47.5, 19.04),        # Budapest
    "Ireland": Coordinates(53.33, -6.26),       # Dublin
    "Italy": Coordinates(41.9, 12.5),           # Rome
    "Latvia": Coordinates(56.95, 24.11),        # Riga
    "Lithuania": Coordinates(54.69, 25.28),     # Vilnius
    "Luxembourg": Coordinates(49.61, 6.13),     # Luxembourg City
    "Malta": Coordinates(35.9, 14.51),          # Valletta
    "Netherlands": Coordinates(52.37, 4.89),    # Amsterdam
    "Poland": Coordinates(52.23, 21.01),        # Warsaw
    "Portugal": Coordinates(38.72, -9.14),      # Lisbon
    "Romania": Coordinates(44.43, 26.1),        # Bucharest
    "Slovakia": Coordinates(48.15, 17.11),      # Bratislava
    "Slovenia": Coordinates(46.06, 14.51),      # Ljubljana
    "Spain": Coordinates(40.42, -3.7),          # Madrid
    "Sweden": Coordinates(59.33, 18.07),        # Stockholm
}


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in kilometres between two points."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lng2 - lng1)

    a = (math.sin(dphi / 2) ** 2 +
         math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2)
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def country_reference_point(country: str) -> Optional[Coordinates]:
    return COUNTRY_REFERENCE_POINTS.get(country)


def reference_distance_km(country: str, coordinates: Coordinates) -> float:
    """Distance from ``coordinates`` to the country's reference point; inf if unmapped."""
    reference = country_reference_point(country)
    if reference is None:
        return math.inf
    return haversine_km(coordinates.lat, coordinates.lng, reference.lat, reference.lng)
