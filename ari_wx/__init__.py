"""
METAR/TAF decision-support screening.

This package turns raw METAR and TAF text into structured data: decoded
fields, a time-segmented TAF timeline with per-segment flight categories,
and a coarse GREEN/AMBER/RED risk judgment.

The main public API includes:
- WeatherParser: Parse raw METAR/TAF text
- segment_taf: Build the forecast timeline of a TAF
- classify: Flight category from visibility and ceiling
- judge: Ceiling-based risk judgment
- StationWeatherService: Fetch and brief a station
"""

__version__ = '0.1.0'
__all__ = [
    'WeatherParser',
    'segment_taf',
    'classify',
    'judge',
    'StationWeatherService',
]

from ari_wx.weather import (
    WeatherParser,
    segment_taf,
    classify,
    judge,
    StationWeatherService,
)
