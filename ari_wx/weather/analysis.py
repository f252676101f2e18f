"""Weather analysis: flight categories and runway wind components."""

import logging
from math import cos, floor, radians, sin
from typing import Optional, Dict, Union

from ari_wx.weather.models import (
    FlightCategory,
    MetarReport,
    ForecastSegment,
    Wind,
    WindComponents,
)

logger = logging.getLogger(__name__)

# Used in place of a missing dimension when the other one is known
DEFAULT_VISIBILITY_METERS = 9999
NO_CEILING_FT = 99999

# Knots per unit of reported wind speed
KNOTS_PER_UNIT = {
    "KT": 1.0,
    "MPS": 3600 / 1852,
    "KMH": 1000 / 1852,
    "KM/H": 1000 / 1852,
}

# (category, visibility below [m], ceiling below [ft]), worst first
CATEGORY_THRESHOLDS = (
    (FlightCategory.LIFR, 1600, 500),
    (FlightCategory.IFR, 3000, 1000),
    (FlightCategory.MVFR, 5000, 3000),
)


def classify(
    visibility_meters: Optional[float],
    ceiling_ft: Optional[float],
) -> FlightCategory:
    """
    Flight category from visibility and ceiling.

    Each threshold is an OR of the two dimensions, so poor visibility or a
    low ceiling alone is enough to downgrade. A missing dimension counts as
    good weather; only when both are missing is the result UNK.

    Args:
        visibility_meters: Visibility in meters, or None
        ceiling_ft: Ceiling in feet, or None

    Returns:
        FlightCategory
    """
    if visibility_meters is None and ceiling_ft is None:
        return FlightCategory.UNK

    visibility = DEFAULT_VISIBILITY_METERS if visibility_meters is None else visibility_meters
    ceiling = NO_CEILING_FT if ceiling_ft is None else ceiling_ft

    for category, max_visibility, max_ceiling in CATEGORY_THRESHOLDS:
        if visibility < max_visibility or ceiling < max_ceiling:
            return category
    return FlightCategory.VFR


class WeatherAnalyzer:
    """
    Aviation weather analysis functions.

    All methods are static: pure functions with no state.
    """

    @staticmethod
    def flight_category(report: Union[MetarReport, ForecastSegment]) -> FlightCategory:
        """
        Flight category of a parsed METAR or TAF segment.

        CAVOK implies VFR regardless of the other fields.
        """
        if getattr(report, 'cavok', False):
            return FlightCategory.VFR
        return classify(report.visibility_meters, report.ceiling_ft)

    @staticmethod
    def wind_components(
        wind: Optional[Wind],
        runway_heading: int,
        runway_ident: str = "",
    ) -> Optional[WindComponents]:
        """
        Head, tail and cross components of the wind for one runway.

        Speeds are converted to knots and every component is rounded to the
        nearest whole knot. Gusts give the peak components, and a
        ``dddVddd`` range gives the worst steady crosswind across it.
        Variable (VRB) wind is taken as blowing straight across the runway.

        Args:
            wind: Reported wind
            runway_heading: Runway heading in degrees (0-360)
            runway_ident: Runway identifier (e.g., "34R")

        Returns:
            WindComponents, or None without wind or with a speed unit that
            cannot be converted to knots
        """
        if wind is None:
            return None

        factor = KNOTS_PER_UNIT.get((wind.unit or "KT").upper())
        if factor is None:
            logger.debug("Cannot convert wind unit %s to knots", wind.unit)
            return None
        speed = wind.speed * factor
        gust = wind.gust * factor if wind.gust else None

        if wind.direction is None:
            return WindComponents(
                runway_ident=runway_ident,
                runway_heading=runway_heading,
                head_steady=0,
                tail_steady=0,
                cross_steady=_whole(speed),
                cross_peak=_whole(gust) if gust is not None else None,
            )

        head = _along(wind.direction, speed, runway_heading)
        components = WindComponents(
            runway_ident=runway_ident,
            runway_heading=runway_heading,
            head_steady=head,
            tail_steady=-head if head < 0 else 0,
            cross_steady=_across(wind.direction, speed, runway_heading),
            crosswind_side=_side(wind.direction, runway_heading),
        )

        if gust is not None:
            head_peak = _along(wind.direction, gust, runway_heading)
            components.head_peak = head_peak
            components.tail_peak = -head_peak if head_peak < 0 else 0
            components.cross_peak = _across(wind.direction, gust, runway_heading)

        if wind.variable_from is not None and wind.variable_to is not None:
            components.variable_crosswind = _range_crosswind(
                wind.variable_from, wind.variable_to, runway_heading, speed
            )
        return components

    @staticmethod
    def wind_components_for_runways(
        wind: Optional[Wind],
        runways: Dict[str, int],
    ) -> Dict[str, WindComponents]:
        """
        Calculate wind components for multiple runways.

        Args:
            wind: Reported wind
            runways: Dict mapping runway ident to heading
                     e.g., {"34R": 337, "16L": 157}

        Returns:
            Dict mapping runway ident to WindComponents
        """
        result = {}
        for ident, heading in runways.items():
            wc = WeatherAnalyzer.wind_components(wind, heading, ident)
            if wc is not None:
                result[ident] = wc
        return result

    @staticmethod
    def compare_categories(
        actual: FlightCategory,
        forecast: FlightCategory,
    ) -> str:
        """
        Compare actual vs forecast flight categories.

        Returns:
            "exact" if same, "worse" if actual is worse, "better" if actual
            is better, "unknown" if either side is UNK
        """
        if actual == forecast:
            return "exact"
        if not actual.is_known or not forecast.is_known:
            return "unknown"
        if actual < forecast:
            return "worse"
        return "better"


# --- Module-level helpers (pure functions) ---

def _whole(value: float) -> int:
    """Nearest whole knot, halves rounded up."""
    return int(floor(value + 0.5))


def _angle_off(direction: int, runway_heading: int) -> float:
    """Smallest angle in degrees between the wind and the runway."""
    diff = abs(direction % 360 - runway_heading % 360)
    return 360 - diff if diff > 180 else diff


def _along(direction: int, speed: float, runway_heading: int) -> int:
    """Component along the runway: positive headwind, negative tailwind."""
    return _whole(cos(radians(_angle_off(direction, runway_heading))) * speed)


def _across(direction: int, speed: float, runway_heading: int) -> int:
    return _whole(abs(sin(radians(_angle_off(direction, runway_heading))) * speed))


def _side(direction: int, runway_heading: int) -> str:
    relative = (direction - runway_heading) % 360
    if relative in (0, 180):
        return ""
    return "right" if relative < 180 else "left"


def _range_crosswind(
    var_from: int,
    var_to: int,
    runway_heading: int,
    speed: float,
) -> int:
    """
    Worst crosswind for wind varying clockwise from var_from to var_to.

    The full speed applies when the arc passes abeam the runway; otherwise
    the crosswind peaks at one of the two ends.
    """
    start = (var_from - runway_heading) % 360
    span = (var_to - var_from) % 360
    if any((abeam - start) % 360 <= span for abeam in (90, 270)):
        return _whole(speed)
    return max(
        _across(var_from, speed, runway_heading),
        _across(var_to, speed, runway_heading),
    )
