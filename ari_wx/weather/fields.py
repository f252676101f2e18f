"""
Token-level field extraction for METAR/TAF text.

Every extractor takes a single whitespace-delimited token and returns the
decoded value, or None when the token is not that kind of group. Nothing here
raises on malformed input: callers scan a token list and keep the first
successful match per field.
"""

import math
import re
from typing import Iterable, List, Optional, Sequence

from ari_wx.weather.models import Wind

METERS_PER_STATUTE_MILE = 1609.344
HPA_PER_INHG = 33.8639

# CAVOK implies visibility of 10 km or more, coded as 9999
CAVOK_VISIBILITY_METERS = 9999

_VIS_METERS_RE = re.compile(r'^(\d{4})$')
_VIS_SM_RE = re.compile(r'^(\d{1,2})SM$')
_VIS_SM_FRACTION_RE = re.compile(r'^(\d{1,2})/(\d{1,2})SM$')
_VIS_SM_PLUS_RE = re.compile(r'^P(\d{1,2})SM$')
_WHOLE_MILES_RE = re.compile(r'^(\d)$')

_QNH_RE = re.compile(r'^Q(\d{4})$')
_INHG_RE = re.compile(r'^A(\d{4})$')

_WIND_RE = re.compile(r'^(VRB|\d{3})(\d{2,3})(?:G(\d{2,3}))?(KT|MPS|KMH)$')
_WIND_VARIATION_RE = re.compile(r'^(\d{3})V(\d{3})$')

_THUNDERSTORM_RE = re.compile(r'^(?:\+|-|VC)?TS[A-Z]*$')
_CB_LAYER_RE = re.compile(r'^(?:FEW|SCT|BKN|OVC|VV)\d{3}CB$')


def tokenize(text: Optional[str]) -> List[str]:
    """
    Normalize whitespace (newlines included), upper-case and split.

    The ``=`` end-of-message marker is dropped.
    """
    if not text:
        return []
    return text.upper().replace("=", " ").split()


def _miles_to_meters(miles: float) -> int:
    return int(round(miles * METERS_PER_STATUTE_MILE))


def _fraction_miles(token: str) -> Optional[float]:
    match = _VIS_SM_FRACTION_RE.match(token)
    if not match:
        return None
    denominator = int(match.group(2))
    if denominator == 0:
        return None
    return int(match.group(1)) / denominator


def extract_visibility(token: str) -> Optional[int]:
    """
    Parse a visibility group into meters.

    Accepted forms:
        9999    ICAO meters, returned as is
        10SM    whole statute miles
        1/2SM   fractional statute miles
        P6SM    "more than" statute miles, converted as a lower bound

    Args:
        token: A single report token

    Returns:
        Visibility in meters, or None if the token is not a visibility group
    """
    if not token:
        return None
    token = token.upper()

    match = _VIS_METERS_RE.match(token)
    if match:
        return int(match.group(1))

    match = _VIS_SM_RE.match(token)
    if match:
        return _miles_to_meters(int(match.group(1)))

    miles = _fraction_miles(token)
    if miles is not None:
        return _miles_to_meters(miles)

    match = _VIS_SM_PLUS_RE.match(token)
    if match:
        return _miles_to_meters(int(match.group(1)))

    return None


def extract_altimeter(token: str) -> Optional[int]:
    """
    Parse an altimeter group into hectopascals.

    ``Q1013`` is already hPa. ``A3020`` is inches of mercury times 100; it is
    converted and truncated to the whole hPa below, the way QNH is reported.

    Returns:
        QNH in hPa, or None if the token is not an altimeter group
    """
    if not token:
        return None
    token = token.upper()

    match = _QNH_RE.match(token)
    if match:
        return int(match.group(1))

    match = _INHG_RE.match(token)
    if match:
        return int(math.floor(int(match.group(1)) * HPA_PER_INHG / 100))

    return None


def has_cavok(tokens: Iterable[str]) -> bool:
    return any(t == "CAVOK" for t in tokens)


def scan_visibility(tokens: Sequence[str]) -> Optional[int]:
    """
    First visibility found in a token list.

    Handles two multi-token cases on top of extract_visibility: CAVOK, and a
    US mixed number split over two tokens (``1 1/2SM``).
    """
    for index, token in enumerate(tokens):
        if token == "CAVOK":
            return CAVOK_VISIBILITY_METERS

        whole = _WHOLE_MILES_RE.match(token)
        if whole and index + 1 < len(tokens):
            fraction = _fraction_miles(tokens[index + 1])
            if fraction is not None:
                return _miles_to_meters(int(whole.group(1)) + fraction)

        value = extract_visibility(token)
        if value is not None:
            return value
    return None


def scan_altimeter(tokens: Iterable[str]) -> Optional[int]:
    """First altimeter setting found in a token list, in hPa."""
    for token in tokens:
        value = extract_altimeter(token)
        if value is not None:
            return value
    return None


def extract_wind(token: str) -> Optional[Wind]:
    """Parse a wind group such as ``24015G25KT`` or ``VRB03KT``."""
    if not token:
        return None
    match = _WIND_RE.match(token.upper())
    if not match:
        return None
    direction, speed, gust, unit = match.groups()
    return Wind(
        speed=int(speed),
        direction=None if direction == "VRB" else int(direction),
        gust=int(gust) if gust else None,
        unit=unit,
    )


def scan_wind(tokens: Sequence[str]) -> Optional[Wind]:
    """First wind group in a token list, with a following ``dddVddd`` folded in."""
    for index, token in enumerate(tokens):
        wind = extract_wind(token)
        if wind is None:
            continue
        if index + 1 < len(tokens):
            variation = _WIND_VARIATION_RE.match(tokens[index + 1])
            if variation:
                return Wind(
                    speed=wind.speed,
                    direction=wind.direction,
                    gust=wind.gust,
                    unit=wind.unit,
                    variable_from=int(variation.group(1)),
                    variable_to=int(variation.group(2)),
                )
        return wind
    return None


def convective_tokens(tokens: Iterable[str]) -> List[str]:
    """
    Tokens signalling thunderstorm or cumulonimbus activity.

    Matches thunderstorm weather groups (TS, +TSRA, VCTS...), a standalone
    CB and cloud layers suffixed with CB (BKN020CB).
    """
    found = []
    for token in tokens:
        if token == "CB" or _THUNDERSTORM_RE.match(token) or _CB_LAYER_RE.match(token):
            found.append(token)
    return found
