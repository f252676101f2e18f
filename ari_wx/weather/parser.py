"""METAR/TAF report parser."""

import re
import logging
from typing import Optional, List, Sequence

from ari_wx.weather.analysis import WeatherAnalyzer
from ari_wx.weather.clouds import cloud_layers, ceiling_of
from ari_wx.weather.fields import (
    tokenize,
    scan_visibility,
    scan_altimeter,
    scan_wind,
    has_cavok,
)
from ari_wx.weather.models import (
    MetarReport,
    ReportTime,
    TafReport,
    WeatherType,
    Wind,
)
from ari_wx.weather.taf_timeline import segment_taf

logger = logging.getLogger(__name__)

_TIME_RE = re.compile(r'^(\d{2})(\d{2})(\d{2})Z$')
_STATION_RE = re.compile(r'^[A-Z][A-Z0-9]{3}$')

# Groups after which a METAR no longer describes the observation itself
_METAR_BODY_END = ("RMK", "TEMPO", "BECMG", "NOSIG")
_HEADER_MODIFIERS = ("COR", "AMD")


class WeatherParser:
    """
    Parse METAR and TAF reports.

    Visibility, altimeter, clouds, ceiling and the TAF timeline come from the
    package's own token extractors. Wind, temperature and present weather of
    a METAR are decoded with the metar_taf_parser library when it accepts the
    report.

    Example:
        report = WeatherParser.parse_metar(
            "METAR RJTT 010500Z 34010KT 9999 FEW030 BKN025 12/05 Q1013"
        )
        report.ceiling_ft  # 2500
    """

    @classmethod
    def parse_metar(cls, raw_text: str) -> Optional[MetarReport]:
        """
        Parse a METAR string.

        Args:
            raw_text: Raw METAR text (may include "METAR" or "SPECI" prefix)

        Returns:
            MetarReport, or None for empty text and NIL reports. Fields that
            cannot be found are left as None.
        """
        if not raw_text or not raw_text.strip():
            return None

        tokens = tokenize(raw_text)
        if not tokens:
            return None

        report_type = WeatherType.METAR
        if tokens[0] == "SPECI":
            report_type = WeatherType.SPECI
            tokens = tokens[1:]
        elif tokens[0] == "METAR":
            tokens = tokens[1:]
        tokens = [t for t in tokens if t not in _HEADER_MODIFIERS]

        if not tokens or "NIL" in tokens:
            return None

        body = cls._observation_body(tokens)
        station = tokens[0] if tokens and _STATION_RE.match(tokens[0]) else ""
        clouds = cloud_layers(body)

        report = MetarReport(
            station=station,
            report_type=report_type,
            raw_text=raw_text,
            observation_time=cls._report_time(body),
            visibility_meters=scan_visibility(body),
            altimeter_hpa=scan_altimeter(body),
            clouds=clouds,
            cloud_groups=[layer.raw for layer in clouds],
            ceiling_ft=ceiling_of(clouds),
            cavok=has_cavok(body),
        )

        cls._decode_supplemental(report, " ".join(tokens))
        if report.wind is None:
            report.wind = scan_wind(body)

        report.flight_category = WeatherAnalyzer.flight_category(report)
        return report

    @classmethod
    def parse_taf(cls, raw_text: str) -> Optional[TafReport]:
        """
        Parse a TAF string into its header and segmented timeline.

        Args:
            raw_text: Raw TAF text, possibly multi-line

        Returns:
            TafReport, or None for empty text and NIL/CNL reports. A TAF
            without a validity window still yields a report, with an empty
            timeline.
        """
        if not raw_text or not raw_text.strip():
            return None

        tokens = tokenize(raw_text)
        if not tokens or "NIL" in tokens or "CNL" in tokens:
            return None

        header = [t for t in tokens if t != "TAF" and t not in _HEADER_MODIFIERS]
        if not header:
            return None
        station = header[0] if header and _STATION_RE.match(header[0]) else ""

        return TafReport(
            station=station,
            raw_text=raw_text,
            issue_time=cls._report_time(header[:3]),
            timeline=segment_taf(raw_text),
        )

    @classmethod
    def parse_auto(cls, raw_text: str):
        """
        Auto-detect METAR vs TAF and parse accordingly.

        Returns:
            MetarReport, TafReport or None
        """
        text = (raw_text or "").strip().upper()
        if text.startswith("TAF"):
            return cls.parse_taf(raw_text)
        return cls.parse_metar(raw_text)

    # --- Internal helpers ---

    @staticmethod
    def _observation_body(tokens: Sequence[str]) -> List[str]:
        """Tokens up to remarks or the trend forecast."""
        for index, token in enumerate(tokens):
            if token in _METAR_BODY_END:
                return list(tokens[:index])
        return list(tokens)

    @staticmethod
    def _report_time(tokens: Sequence[str]) -> Optional[ReportTime]:
        for token in tokens:
            match = _TIME_RE.match(token)
            if match:
                day, hour, minute = (int(g) for g in match.groups())
                return ReportTime(day, hour, minute)
        return None

    @classmethod
    def _decode_supplemental(cls, report: MetarReport, text: str) -> None:
        """Fill wind, temperature and present weather from metar_taf_parser."""
        from metar_taf_parser.parser.parser import MetarParser

        try:
            parsed = MetarParser().parse(text)
        except Exception as e:
            logger.debug("metar_taf_parser rejected METAR: %s - %s", text[:80], e)
            return

        report.wind = cls._extract_wind(parsed)
        report.temperature = getattr(parsed, 'temperature', None)
        report.dewpoint = getattr(parsed, 'dew_point', None)
        report.weather_conditions = cls._extract_weather_conditions(parsed)

    @classmethod
    def _extract_wind(cls, parsed) -> Optional[Wind]:
        wind = getattr(parsed, 'wind', None)
        if not wind:
            return None

        speed = getattr(wind, 'speed', None)
        if speed is None:
            return None

        return Wind(
            speed=speed,
            direction=getattr(wind, 'degrees', None),
            gust=getattr(wind, 'gust', None),
            unit=getattr(wind, 'unit', 'KT') or "KT",
            variable_from=getattr(wind, 'min_variation', None),
            variable_to=getattr(wind, 'max_variation', None),
        )

    @classmethod
    def _extract_weather_conditions(cls, parsed) -> List[str]:
        """Present weather as coded strings, e.g. "-RA", "TSRA"."""
        conditions = getattr(parsed, 'weather_conditions', None)
        if not conditions:
            return []

        result = []
        for wc in conditions:
            parts = []
            intensity = getattr(wc, 'intensity', None)
            if intensity:
                parts.append(intensity.value if hasattr(intensity, 'value') else str(intensity))
            descriptive = getattr(wc, 'descriptive', None)
            if descriptive:
                parts.append(descriptive.value if hasattr(descriptive, 'value') else str(descriptive))
            phenomenons = getattr(wc, 'phenomenons', [])
            if phenomenons:
                for p in phenomenons:
                    parts.append(p.value if hasattr(p, 'value') else str(p))
            if parts:
                result.append("".join(parts))
        return result
