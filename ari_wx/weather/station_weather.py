"""Station weather service: fetch, parse, segment and judge one airport."""

import logging
from typing import Optional, TYPE_CHECKING

from ari_wx.weather.judgment import judge_briefing
from ari_wx.weather.models import StationBriefing
from ari_wx.weather.parser import WeatherParser

if TYPE_CHECKING:
    from ari_wx.sources.avwx import AvWxSource, FetchResult

logger = logging.getLogger(__name__)

_ERROR_MESSAGES = {
    "timeout": "{report} request timed out",
    "http_error": "{report} provider returned an error",
    "no_data": "No {report} available for {icao}",
    "network": "{report} provider unreachable",
    "invalid_station": "Invalid station code {icao}",
}


def build_briefing(
    icao: str,
    metar_text: Optional[str],
    taf_text: Optional[str],
    metar_error: Optional[str] = None,
    taf_error: Optional[str] = None,
) -> StationBriefing:
    """
    Parse both reports and judge them. No I/O.

    Args:
        icao: Station identifier
        metar_text: Raw METAR, empty or None when unavailable
        taf_text: Raw TAF, empty or None when unavailable
        metar_error: Message to report when the METAR is unavailable
        taf_error: Message to report when the TAF is unavailable

    Returns:
        StationBriefing
    """
    station = (icao or "").strip().upper()

    metar = WeatherParser.parse_metar(metar_text) if metar_text else None
    taf = WeatherParser.parse_taf(taf_text) if taf_text else None

    if metar is None and metar_error is None:
        metar_error = f"No METAR available for {station}"
    if taf is None and taf_error is None:
        taf_error = f"No TAF available for {station}"

    return StationBriefing(
        icao=station,
        metar=metar,
        taf=taf,
        judgment=judge_briefing(metar, taf),
        metar_error=metar_error if metar is None else None,
        taf_error=taf_error if taf is None else None,
    )


def describe_failure(result: 'FetchResult', report: str, icao: str) -> str:
    """User-facing message for a failed fetch."""
    kind = result.error_kind.value if result.error_kind else "network"
    template = _ERROR_MESSAGES.get(kind, "{report} unavailable")
    return template.format(report=report, icao=icao)


class StationWeatherService:
    """
    Orchestrates weather fetching and analysis for a station.

    Example:
        service = StationWeatherService()
        briefing = service.fetch_briefing("RJTT")
        print(briefing.judgment.level, briefing.judgment.reasons)
        for segment in briefing.taf.segments:
            print(segment.label, segment.category)
    """

    def __init__(self, source: Optional['AvWxSource'] = None):
        """
        Args:
            source: AvWxSource instance. Created automatically if not provided.
        """
        self._source = source

    def _get_source(self) -> 'AvWxSource':
        if self._source is None:
            from ari_wx.sources.avwx import AvWxSource
            self._source = AvWxSource()
        return self._source

    def fetch_briefing(self, icao: str) -> StationBriefing:
        """
        Fetch METAR and TAF concurrently, then build the briefing.

        Fetch failures end up as metar_error/taf_error; this never raises
        for upstream problems.
        """
        station = (icao or "").strip().upper()
        metar_result, taf_result = self._get_source().fetch_pair(station)
        logger.info(
            "Fetched weather for %s (metar ok=%s, taf ok=%s)",
            station, metar_result.ok, taf_result.ok,
        )

        return build_briefing(
            station,
            metar_result.text if metar_result.ok else None,
            taf_result.text if taf_result.ok else None,
            metar_error=None if metar_result.ok else describe_failure(metar_result, "METAR", station),
            taf_error=None if taf_result.ok else describe_failure(taf_result, "TAF", station),
        )
