"""
Coarse risk judgment (GREEN / AMBER / RED) with explanatory reasons.

The judgment is a screening aid, not a go/no-go decision. Live rules:

    ceiling below 3000 ft                        AMBER
    TS/CB inside a TEMPO group                   RED
    TS/CB inside a PROBnn TEMPO group            AMBER
    TS/CB inside an FM or BECMG group            AMBER

Flight category and runway wind limits do not raise the level.
"""

import logging
from typing import Optional

from ari_wx.weather.clouds import CloudInput, ceiling_of
from ari_wx.weather.fields import convective_tokens, tokenize
from ari_wx.weather.models import (
    MetarReport,
    RiskJudgment,
    RiskLevel,
    SegmentKind,
    TafReport,
    TafTimeline,
)

logger = logging.getLogger(__name__)

CEILING_AMBER_FT = 3000


def judge(
    clouds: Optional[CloudInput] = None,
    ceiling_ft: Optional[int] = None,
) -> RiskJudgment:
    """
    Judge risk from the cloud base.

    Args:
        clouds: Cloud groups (strings such as "BKN020", or CloudLayer objects)
        ceiling_ft: Pre-computed ceiling; takes precedence over clouds

    Returns:
        AMBER with one reason if the ceiling is below 3000 ft, else GREEN
    """
    if ceiling_ft is None and clouds:
        ceiling_ft = ceiling_of(clouds)

    reasons = []
    if ceiling_ft is not None and ceiling_ft < CEILING_AMBER_FT:
        reasons.append(f"Ceiling present (<{CEILING_AMBER_FT}ft): {ceiling_ft}ft")

    level = RiskLevel.AMBER if reasons else RiskLevel.GREEN
    return RiskJudgment(level=level, reasons=reasons, ceiling_ft=ceiling_ft)


def _convective_labels(timeline: TafTimeline, kinds) -> list:
    return [
        group.label
        for group in timeline.change_groups
        if group.kind in kinds and convective_tokens(tokenize(group.condition_text))
    ]


def assess_taf_convection(timeline: TafTimeline) -> RiskJudgment:
    """
    Screen TAF change groups for thunderstorm and cumulonimbus signals.

    Every change group in the text counts, including those that have no
    segment on the timeline (outside the validity, or a validity that
    crosses a month end).

    Returns:
        RED when a TEMPO group carries TS/CB, AMBER for PROB TEMPO or
        FM/BECMG groups carrying TS/CB, GREEN otherwise
    """
    reasons = []
    level = RiskLevel.GREEN

    tempo = _convective_labels(timeline, (SegmentKind.TEMPO,))
    if tempo:
        reasons.append(f"TAF TEMPO includes TS/CB ({', '.join(tempo)})")
        level = RiskLevel.RED

    prob_tempo = [
        label for label in _convective_labels(timeline, (SegmentKind.PROB,))
        if "TEMPO" in label.split()
    ]
    if prob_tempo:
        reasons.append(f"TAF PROB TEMPO includes TS/CB ({', '.join(prob_tempo)})")
        if level is RiskLevel.GREEN:
            level = RiskLevel.AMBER

    trend = _convective_labels(timeline, (SegmentKind.FM, SegmentKind.BECMG))
    if trend:
        reasons.append(f"TAF trend (FM/BECMG) indicates TS/CB possibility ({', '.join(trend)})")
        if level is RiskLevel.GREEN:
            level = RiskLevel.AMBER

    return RiskJudgment(level=level, reasons=reasons)


def judge_briefing(
    metar: Optional[MetarReport],
    taf: Optional[TafReport],
) -> RiskJudgment:
    """
    Combined judgment for a station: METAR ceiling plus TAF convection.

    Either report may be missing; a missing report contributes nothing.
    """
    judgment = RiskJudgment()
    if metar is not None:
        judgment = judge(clouds=metar.clouds, ceiling_ft=metar.ceiling_ft)
    if taf is not None:
        judgment = judgment.merge(assess_taf_convection(taf.timeline))
    logger.debug("Judgment %s: %s", judgment.level.value, judgment.reasons)
    return judgment
