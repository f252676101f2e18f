"""
Weather module for parsing, segmenting and judging METAR/TAF reports.

Provides:
- Field extraction: visibility, altimeter/QNH, wind (fields)
- Cloud layers and ceiling (clouds)
- FlightCategory classification and wind components (analysis)
- TAF validity and timeline segmentation (taf_timeline)
- GREEN/AMBER/RED risk judgment (judgment)
- Operating wind limits (limits)
- WeatherParser: METAR/TAF records
- StationWeatherService: fetch + brief one station

Example:
    from ari_wx.weather import WeatherParser, judge

    report = WeatherParser.parse_metar(
        "METAR RJTT 010500Z 34010KT 9999 FEW015 BKN025 12/05 Q1013"
    )
    print(report.flight_category)  # FlightCategory.MVFR
    print(judge(report.cloud_groups).level)  # RiskLevel.AMBER
"""

from ari_wx.weather.models import (
    ChangeGroup,
    CloudLayer,
    FlightCategory,
    ForecastSegment,
    MetarReport,
    ReportTime,
    RiskJudgment,
    RiskLevel,
    SegmentKind,
    StationBriefing,
    TafReport,
    TafTimeline,
    ValidityWindow,
    WeatherType,
    Wind,
    WindComponents,
)
from ari_wx.weather.fields import extract_visibility, extract_altimeter
from ari_wx.weather.clouds import parse_cloud_layer, cloud_layers, ceiling_of
from ari_wx.weather.analysis import classify, WeatherAnalyzer
from ari_wx.weather.taf_timeline import (
    TafSegmenter,
    segment_taf,
    parse_validity,
    anchor_timeline,
)
from ari_wx.weather.judgment import judge, assess_taf_convection, judge_briefing
from ari_wx.weather.limits import (
    ApproachCategory,
    OperatingLimits,
    RunwaySurface,
    WindLimits,
)
from ari_wx.weather.parser import WeatherParser
from ari_wx.weather.station_weather import StationWeatherService, build_briefing

__all__ = [
    'ChangeGroup',
    'CloudLayer',
    'FlightCategory',
    'ForecastSegment',
    'MetarReport',
    'ReportTime',
    'RiskJudgment',
    'RiskLevel',
    'SegmentKind',
    'StationBriefing',
    'TafReport',
    'TafTimeline',
    'ValidityWindow',
    'WeatherType',
    'Wind',
    'WindComponents',
    'extract_visibility',
    'extract_altimeter',
    'parse_cloud_layer',
    'cloud_layers',
    'ceiling_of',
    'classify',
    'WeatherAnalyzer',
    'TafSegmenter',
    'segment_taf',
    'parse_validity',
    'anchor_timeline',
    'judge',
    'assess_taf_convection',
    'judge_briefing',
    'ApproachCategory',
    'OperatingLimits',
    'RunwaySurface',
    'WindLimits',
    'WeatherParser',
    'StationWeatherService',
    'build_briefing',
]
