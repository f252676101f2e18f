#!/usr/bin/env python3

"""
Command line briefing for one station.

    python -m ari_wx RJTT
    python -m ari_wx RJTT --metar "RJTT 010500Z 34010KT 9999 BKN025 12/05 Q1013" \
        --taf "TAF RJTT 010500Z 0106/0212 34010KT 9999 FEW030"
    python -m ari_wx RJTT --runway 34R:337 --surface WET --json
"""

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Dict, List, Optional

from ari_wx import config
from ari_wx.weather.analysis import WeatherAnalyzer
from ari_wx.weather.limits import ApproachCategory, OperatingLimits, RunwaySurface
from ari_wx.weather.models import StationBriefing
from ari_wx.weather.station_weather import StationWeatherService, build_briefing
from ari_wx.weather.taf_timeline import anchor_timeline

logger = logging.getLogger(__name__)


def _parse_runways(values: List[str]) -> Dict[str, int]:
    """Parse ``IDENT:HEADING`` arguments."""
    runways = {}
    for value in values or []:
        ident, _, heading = value.partition(":")
        if not heading.isdigit():
            raise argparse.ArgumentTypeError(f"Runway must be IDENT:HEADING, got {value!r}")
        runways[ident.upper()] = int(heading)
    return runways


def _format_value(value, unit: str) -> str:
    return "-" if value is None else f"{value}{unit}"


def format_briefing(
    briefing: StationBriefing,
    reference: Optional[datetime] = None,
) -> str:
    """Plain text rendering of a briefing for the terminal."""
    lines = [f"{briefing.icao}  WX LEVEL: {briefing.judgment.level.value}"]
    for reason in briefing.judgment.reasons:
        lines.append(f"  - {reason}")

    metar = briefing.metar
    if metar is None:
        lines.append(f"METAR: {briefing.metar_error}")
    else:
        lines.append(f"METAR: {metar.raw_text.strip()}")
        lines.append(
            "  Wind {}  Vis {}  QNH {}  Ceiling {}  Category {}".format(
                metar.wind.text if metar.wind else "-",
                _format_value(metar.visibility_meters, "m"),
                _format_value(metar.altimeter_hpa, "hPa"),
                _format_value(metar.ceiling_ft, "ft"),
                metar.flight_category.value,
            )
        )
        if metar.weather_conditions:
            lines.append(f"  Weather {' '.join(metar.weather_conditions)}")

    taf = briefing.taf
    if taf is None:
        lines.append(f"TAF: {briefing.taf_error}")
    else:
        lines.append(f"TAF: {taf.validity_label}")
        anchored = anchor_timeline(taf.timeline, reference) if reference else []
        times = {id(a.segment): a for a in anchored}
        for segment in taf.segments:
            span = f"+{segment.start_offset_minutes // 60:02d}h..+{segment.end_offset_minutes // 60:02d}h"
            a = times.get(id(segment))
            if a is not None:
                span = f"{a.start:%d %H%MZ}-{a.end:%d %H%MZ}"
            lines.append(
                f"  {segment.label:<22} {span:<18} {segment.category.value:<5} {segment.condition_text}"
            )
    return "\n".join(lines)


def format_wind(briefing: StationBriefing, runways: Dict[str, int], args) -> List[str]:
    if briefing.metar is None or briefing.metar.wind is None:
        return ["Runway wind: no wind reported"]

    limits = OperatingLimits.default().for_conditions(
        RunwaySurface(args.surface),
        ApproachCategory(args.approach),
        autoland=args.autoland,
    )
    wind = briefing.metar.wind
    components = WeatherAnalyzer.wind_components_for_runways(wind, runways)
    if not components:
        return [f"Runway wind: cannot convert {wind.unit} to knots"]

    lines = []
    for ident, wc in components.items():
        status = ""
        if limits is not None:
            status = "within limits" if wc.within_limits(limits) else "EXCEEDS limits"
        side = f" {wc.crosswind_side}" if wc.crosswind_side else ""
        peak = ""
        if wc.cross_peak is not None:
            peak = f" | gust HW {wc.head_peak or 0:+d} XW {wc.cross_peak} TW {wc.tail_peak or 0}"
        variable = ""
        if wc.variable_crosswind is not None:
            variable = f" | variable XW {wc.variable_crosswind}"
        lines.append(
            f"RWY {ident}: HW {wc.head_steady:+d} XW {wc.cross_steady}{side} "
            f"TW {wc.tail_steady}{peak}{variable} {status}".rstrip()
        )
    return lines


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='METAR/TAF weather screen for one station')
    parser.add_argument('icao', help='ICAO station code')
    parser.add_argument('--metar', help='Raw METAR text (skips fetching)')
    parser.add_argument('--taf', help='Raw TAF text (skips fetching)')
    parser.add_argument('--runway', help='Runway as IDENT:HEADING for wind components', action='append')
    parser.add_argument('--surface', help='Runway surface condition',
                        choices=[s.value for s in RunwaySurface], default=RunwaySurface.DRY.value)
    parser.add_argument('--approach', help='Approach category',
                        choices=[a.value for a in ApproachCategory], default=ApproachCategory.CATI.value)
    parser.add_argument('--autoland', help='Use autoland wind limits', action='store_true')
    parser.add_argument('--json', help='Print the briefing as JSON', action='store_true')
    parser.add_argument('-v', '--verbose', help='Verbose output', action='store_true')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format=config.LOG_FORMAT,
    )
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        runways = _parse_runways(args.runway)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))

    if args.metar is not None or args.taf is not None:
        briefing = build_briefing(args.icao, args.metar, args.taf)
    else:
        briefing = StationWeatherService().fetch_briefing(args.icao)

    if args.json:
        print(json.dumps(briefing.to_dict(), indent=2))
        return 0

    print(format_briefing(briefing, reference=datetime.now(timezone.utc)))
    if runways:
        for line in format_wind(briefing, runways, args):
            print(line)
    return 0


if __name__ == '__main__':
    sys.exit(main())
