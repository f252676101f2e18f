"""Weather report data models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict, Any, TYPE_CHECKING

if TYPE_CHECKING:
    from ari_wx.weather.limits import WindLimits


class FlightCategory(Enum):
    """
    Flight category based on ceiling and visibility.

    Ordered from worst to best: LIFR < IFR < MVFR < VFR.
    UNK (no visibility and no ceiling information at all) is not ordered
    against the other categories.

    Thresholds (ceiling OR visibility, whichever is worse):
        LIFR:  visibility < 1600 m  or  ceiling < 500 ft
        IFR:   visibility < 3000 m  or  ceiling < 1000 ft
        MVFR:  visibility < 5000 m  or  ceiling < 3000 ft
        VFR:   otherwise
    """

    LIFR = "LIFR"
    IFR = "IFR"
    MVFR = "MVFR"
    VFR = "VFR"
    UNK = "UNK"

    @property
    def order(self) -> Optional[int]:
        """Numeric ordering from worst (0) to best (3), None for UNK."""
        return _CATEGORY_ORDER.get(self)

    @property
    def is_known(self) -> bool:
        return self is not FlightCategory.UNK

    def _comparable(self, other) -> bool:
        return (
            isinstance(other, FlightCategory)
            and self.is_known
            and other.is_known
        )

    def __lt__(self, other: 'FlightCategory') -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.order < other.order

    def __le__(self, other: 'FlightCategory') -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.order <= other.order

    def __gt__(self, other: 'FlightCategory') -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.order > other.order

    def __ge__(self, other: 'FlightCategory') -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.order >= other.order


_CATEGORY_ORDER = {
    FlightCategory.LIFR: 0,
    FlightCategory.IFR: 1,
    FlightCategory.MVFR: 2,
    FlightCategory.VFR: 3,
}


class RiskLevel(Enum):
    """Coarse risk level, ordered by severity: GREEN < AMBER < RED."""

    GREEN = "GREEN"
    AMBER = "AMBER"
    RED = "RED"

    @property
    def severity(self) -> int:
        return _RISK_SEVERITY[self]

    def __lt__(self, other: 'RiskLevel') -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.severity < other.severity

    def __gt__(self, other: 'RiskLevel') -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.severity > other.severity


_RISK_SEVERITY = {
    RiskLevel.GREEN: 0,
    RiskLevel.AMBER: 1,
    RiskLevel.RED: 2,
}


class WeatherType(Enum):
    """Type of weather report."""

    METAR = "METAR"
    SPECI = "SPECI"


class SegmentKind(Enum):
    """TAF timeline segment kind."""

    BASE = "BASE"
    FM = "FM"
    BECMG = "BECMG"
    TEMPO = "TEMPO"
    PROB = "PROB"

    @property
    def is_overlay(self) -> bool:
        """BECMG/TEMPO/PROB deviate from the baseline, they never replace it."""
        return self in (SegmentKind.BECMG, SegmentKind.TEMPO, SegmentKind.PROB)


@dataclass(frozen=True)
class ReportTime:
    """Day-of-month and UTC time of a report (e.g. ``211230Z``)."""

    day: int
    hour: int
    minute: int

    @property
    def label(self) -> str:
        return f"{self.day:02d}{self.hour:02d}{self.minute:02d}Z"


@dataclass(frozen=True)
class CloudLayer:
    """
    A single cloud group such as ``BKN025`` or ``OVC010CB``.

    Attributes:
        kind: FEW, SCT, BKN, OVC or VV
        height_hundreds_ft: The 3-digit height as coded (hundreds of feet)
        cloud_type: CB or TCU when the group carries one
        raw: The token as it appeared in the report
    """

    kind: str
    height_hundreds_ft: int
    cloud_type: Optional[str] = None
    raw: str = ""

    @property
    def height_ft(self) -> int:
        return self.height_hundreds_ft * 100

    @property
    def is_ceiling(self) -> bool:
        return self.kind in CEILING_KINDS

    def to_dict(self) -> dict:
        return {
            'kind': self.kind,
            'height_ft': self.height_ft,
            'cloud_type': self.cloud_type,
            'raw': self.raw,
        }


CEILING_KINDS = ("BKN", "OVC", "VV")


@dataclass(frozen=True)
class ValidityWindow:
    """
    TAF validity window as coded: ``DDHH/DDHH``.

    There is no month or year. Elapsed time is the flat offset from
    start_day/start_hour; day numbers are subtracted directly, so a window
    crossing a month end (e.g. 3118/0106) produces a negative span.
    """

    start_day: int
    start_hour: int
    end_day: int
    end_hour: int

    def offset_minutes(self, day: int, hour: int, minute: int = 0) -> int:
        """Minutes from the validity start to the given day/hour/minute."""
        return ((day - self.start_day) * 24 + (hour - self.start_hour)) * 60 + minute

    @property
    def total_minutes(self) -> int:
        return self.offset_minutes(self.end_day, self.end_hour)

    @property
    def label(self) -> str:
        return (
            f"{self.start_day:02d}/{self.start_hour:02d}Z - "
            f"{self.end_day:02d}/{self.end_hour:02d}Z"
        )

    def to_dict(self) -> dict:
        return {
            'start_day': self.start_day,
            'start_hour': self.start_hour,
            'end_day': self.end_day,
            'end_hour': self.end_hour,
        }


@dataclass
class ForecastSegment:
    """
    One time-bounded piece of a TAF timeline.

    Offsets are minutes from the validity start. BASE and FM segments form
    the baseline; BECMG, TEMPO and PROB segments are overlays with their own
    explicit windows.
    """

    kind: SegmentKind
    start_offset_minutes: int
    end_offset_minutes: int
    label: str
    condition_text: str = ""
    visibility_meters: Optional[int] = None
    ceiling_ft: Optional[int] = None
    category: FlightCategory = FlightCategory.UNK
    probability: Optional[int] = None
    clouds: List[CloudLayer] = field(default_factory=list)

    @property
    def is_overlay(self) -> bool:
        return self.kind.is_overlay

    def to_dict(self) -> dict:
        return {
            'kind': self.kind.value,
            'start_offset_minutes': self.start_offset_minutes,
            'end_offset_minutes': self.end_offset_minutes,
            'label': self.label,
            'condition_text': self.condition_text,
            'visibility_meters': self.visibility_meters,
            'ceiling_ft': self.ceiling_ft,
            'category': self.category.value,
            'probability': self.probability,
            'clouds': [c.to_dict() for c in self.clouds],
        }

    def __repr__(self) -> str:
        return (
            f"ForecastSegment({self.label} "
            f"{self.start_offset_minutes}-{self.end_offset_minutes} {self.category.value})"
        )


@dataclass(frozen=True)
class ChangeGroup:
    """
    A TAF change group as written (FM, BECMG, TEMPO or PROB).

    Kept whether or not its window fits on the timeline, so that a group
    falling outside the validity (or a validity crossing a month end) is
    still screened.
    """

    kind: SegmentKind
    label: str
    condition_text: str = ""
    probability: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            'kind': self.kind.value,
            'label': self.label,
            'condition_text': self.condition_text,
            'probability': self.probability,
        }


@dataclass
class TafTimeline:
    """
    Ordered forecast segments of one TAF.

    change_groups lists every change group found in the text, in source
    order, including those with no segment on the timeline.
    """

    segments: List[ForecastSegment] = field(default_factory=list)
    total_offset_minutes: int = 0
    validity_label: str = ""
    validity: Optional[ValidityWindow] = None
    change_groups: List[ChangeGroup] = field(default_factory=list)

    @property
    def is_available(self) -> bool:
        return self.validity is not None

    def baseline(self) -> List[ForecastSegment]:
        """BASE and FM segments, in timeline order."""
        return [s for s in self.segments if not s.is_overlay]

    def overlays(self) -> List[ForecastSegment]:
        """BECMG, TEMPO and PROB segments, in timeline order."""
        return [s for s in self.segments if s.is_overlay]

    def worst_category(self) -> Optional[FlightCategory]:
        """Worst known category across all segments, None if none is known."""
        known = [s.category for s in self.segments if s.category.is_known]
        if not known:
            return None
        return min(known)

    def to_dict(self) -> dict:
        return {
            'segments': [s.to_dict() for s in self.segments],
            'total_offset_minutes': self.total_offset_minutes,
            'validity_label': self.validity_label,
            'validity': self.validity.to_dict() if self.validity else None,
            'change_groups': [g.to_dict() for g in self.change_groups],
        }


@dataclass
class RiskJudgment:
    """Risk level with the reasons that produced it."""

    level: RiskLevel = RiskLevel.GREEN
    reasons: List[str] = field(default_factory=list)
    ceiling_ft: Optional[int] = None

    def merge(self, other: 'RiskJudgment') -> 'RiskJudgment':
        """Combine two judgments: most severe level, reasons in order."""
        level = self.level if self.level.severity >= other.level.severity else other.level
        ceiling = self.ceiling_ft if self.ceiling_ft is not None else other.ceiling_ft
        return RiskJudgment(
            level=level,
            reasons=list(self.reasons) + list(other.reasons),
            ceiling_ft=ceiling,
        )

    def to_dict(self) -> dict:
        return {
            'level': self.level.value,
            'reasons': list(self.reasons),
            'ceiling_ft': self.ceiling_ft,
        }


@dataclass(frozen=True)
class Wind:
    """
    Surface wind as reported.

    direction is None for variable (VRB) wind.
    """

    speed: int
    direction: Optional[int] = None
    gust: Optional[int] = None
    unit: str = "KT"
    variable_from: Optional[int] = None
    variable_to: Optional[int] = None

    @property
    def text(self) -> str:
        direction = "VRB" if self.direction is None else f"{self.direction:03d}"
        gust = f"G{self.gust:02d}" if self.gust is not None else ""
        text = f"{direction}/{self.speed:02d}{gust}{self.unit}"
        if self.variable_from is not None and self.variable_to is not None:
            text += f" {self.variable_from:03d}V{self.variable_to:03d}"
        return text

    def to_dict(self) -> dict:
        return {
            'direction': self.direction,
            'speed': self.speed,
            'gust': self.gust,
            'unit': self.unit,
            'variable_from': self.variable_from,
            'variable_to': self.variable_to,
            'text': self.text,
        }


@dataclass
class WindComponents:
    """
    Wind components relative to a runway, in whole knots.

    Steady values come from the mean wind, peak values from the gust (None
    when no gust is reported). Crosswinds are magnitudes; crosswind_side
    says which side the wind comes from. variable_crosswind is the worst
    steady crosswind anywhere inside a reported ``dddVddd`` range.
    """

    runway_ident: str
    runway_heading: int
    head_steady: int
    tail_steady: int
    cross_steady: int
    head_peak: Optional[int] = None
    tail_peak: Optional[int] = None
    cross_peak: Optional[int] = None
    variable_crosswind: Optional[int] = None
    crosswind_side: str = ""  # "left", "right" or "" when unknown

    @property
    def max_tailwind(self) -> int:
        return max(self.tail_steady, self.tail_peak or 0)

    @property
    def max_crosswind(self) -> int:
        return max(self.cross_steady, self.cross_peak or 0, self.variable_crosswind or 0)

    def within_limits(self, limits: 'WindLimits') -> bool:
        """
        Check the components against operating limits.

        Steady and variable-range crosswinds are held to max_crosswind; the
        peak crosswind to max_crosswind_gust when the limits carry one.
        """
        steady_cross = max(self.cross_steady, self.variable_crosswind or 0)
        if steady_cross > limits.max_crosswind:
            return False
        if self.cross_peak is not None:
            gust_limit = limits.max_crosswind_gust
            if gust_limit is None:
                gust_limit = limits.max_crosswind
            if self.cross_peak > gust_limit:
                return False
        return self.max_tailwind <= limits.max_tailwind

    def to_dict(self) -> dict:
        return {
            'runway_ident': self.runway_ident,
            'runway_heading': self.runway_heading,
            'head_steady': self.head_steady,
            'tail_steady': self.tail_steady,
            'cross_steady': self.cross_steady,
            'head_peak': self.head_peak,
            'tail_peak': self.tail_peak,
            'cross_peak': self.cross_peak,
            'variable_crosswind': self.variable_crosswind,
            'crosswind_side': self.crosswind_side,
        }


@dataclass
class MetarReport:
    """
    Parsed METAR or SPECI.

    Attributes:
        station: ICAO station identifier
        report_type: METAR or SPECI
        raw_text: Original report text, echoed verbatim
        observation_time: Day/time group of the observation
        wind: Surface wind, None when not decoded
        visibility_meters: Prevailing visibility in meters
        altimeter_hpa: QNH in hectopascals
        clouds: Parsed cloud layers
        cloud_groups: Cloud groups as they appear in the report
        ceiling_ft: Lowest BKN/OVC/VV layer in feet
        cavok: Ceiling And Visibility OK
        weather_conditions: Present weather groups (e.g. "-RA", "TSRA")
        temperature: Temperature in Celsius
        dewpoint: Dewpoint in Celsius
        flight_category: Computed flight category
    """

    station: str = ""
    report_type: WeatherType = WeatherType.METAR
    raw_text: str = ""
    observation_time: Optional[ReportTime] = None
    wind: Optional[Wind] = None
    visibility_meters: Optional[int] = None
    altimeter_hpa: Optional[int] = None
    clouds: List[CloudLayer] = field(default_factory=list)
    cloud_groups: List[str] = field(default_factory=list)
    ceiling_ft: Optional[int] = None
    cavok: bool = False
    weather_conditions: List[str] = field(default_factory=list)
    temperature: Optional[int] = None
    dewpoint: Optional[int] = None
    flight_category: FlightCategory = FlightCategory.UNK

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary for JSON export."""
        return {
            'station': self.station,
            'report_type': self.report_type.value,
            'raw_text': self.raw_text,
            'observation_time': self.observation_time.label if self.observation_time else None,
            'wind': self.wind.to_dict() if self.wind else None,
            'visibility_meters': self.visibility_meters,
            'altimeter_hpa': self.altimeter_hpa,
            'clouds': [c.to_dict() for c in self.clouds],
            'cloud_groups': list(self.cloud_groups),
            'ceiling_ft': self.ceiling_ft,
            'cavok': self.cavok,
            'weather_conditions': list(self.weather_conditions),
            'temperature': self.temperature,
            'dewpoint': self.dewpoint,
            'flight_category': self.flight_category.value,
        }

    def __repr__(self) -> str:
        return f"MetarReport({self.report_type.value} {self.station} {self.flight_category.value})"


@dataclass
class TafReport:
    """Parsed TAF: header fields plus the segmented timeline."""

    station: str = ""
    raw_text: str = ""
    issue_time: Optional[ReportTime] = None
    timeline: TafTimeline = field(default_factory=TafTimeline)

    @property
    def validity_label(self) -> str:
        return self.timeline.validity_label

    @property
    def segments(self) -> List[ForecastSegment]:
        return self.timeline.segments

    def to_dict(self) -> Dict[str, Any]:
        return {
            'station': self.station,
            'raw_text': self.raw_text,
            'issue_time': self.issue_time.label if self.issue_time else None,
            'validity_label': self.validity_label,
            'timeline': self.timeline.to_dict(),
        }

    def __repr__(self) -> str:
        return f"TafReport({self.station} {self.validity_label} {len(self.segments)} segments)"


@dataclass
class StationBriefing:
    """
    METAR, TAF and combined risk judgment for one station.

    metar_error/taf_error carry a user-facing message when the report could
    not be obtained; the corresponding report is then None.
    """

    icao: str
    metar: Optional[MetarReport] = None
    taf: Optional[TafReport] = None
    judgment: RiskJudgment = field(default_factory=RiskJudgment)
    metar_error: Optional[str] = None
    taf_error: Optional[str] = None

    @property
    def forecast_worst_category(self) -> Optional[FlightCategory]:
        if self.taf is None:
            return None
        return self.taf.timeline.worst_category()

    def to_dict(self) -> Dict[str, Any]:
        worst = self.forecast_worst_category
        return {
            'icao': self.icao,
            'metar': self.metar.to_dict() if self.metar else None,
            'taf': self.taf.to_dict() if self.taf else None,
            'judgment': self.judgment.to_dict(),
            'forecast_worst_category': worst.value if worst else None,
            'metar_error': self.metar_error,
            'taf_error': self.taf_error,
        }
