"""
TAF validity parsing and forecast timeline segmentation.

A TAF body is cut into time-bounded segments, all expressed as minutes from
the validity start:

    BASE    the conditions before the first change group, from offset 0
            until the first FM (or validity end)
    FM      FMDDHHMM, a reset that holds until the next FM (or validity end)
    BECMG   BECMG DDHH/DDHH, a gradual change over its own window
    TEMPO   TEMPO DDHH/DDHH, temporary fluctuations over its own window
    PROB    PROBnn DDHH/DDHH or PROBnn TEMPO DDHH/DDHH

BASE and FM segments tile the validity window. BECMG, TEMPO and PROB are
overlays: they keep their own entries and never replace baseline coverage.

Example:
    timeline = segment_taf(
        "TAF RJTT 010500Z 0106/0212 34010KT 9999 FEW030 "
        "TEMPO 0108/0112 4000 -RA BKN020 FM011800 18005KT CAVOK"
    )
    for segment in timeline.segments:
        print(segment.label, segment.start_offset_minutes, segment.category)
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, NamedTuple, Optional, Sequence, Tuple

from dateutil.relativedelta import relativedelta

from ari_wx.weather.analysis import classify
from ari_wx.weather.clouds import cloud_layers, ceiling_of
from ari_wx.weather.fields import tokenize, scan_visibility
from ari_wx.weather.models import (
    ChangeGroup,
    ForecastSegment,
    SegmentKind,
    TafTimeline,
    ValidityWindow,
)

logger = logging.getLogger(__name__)

NO_VALIDITY_LABEL = "validity unavailable"

_WINDOW_RE = re.compile(r'^(\d{2})(\d{2})/(\d{2})(\d{2})$')
_FM_RE = re.compile(r'^FM(\d{2})(\d{2})(\d{2})$')
_PROB_RE = re.compile(r'^PROB(\d{2})$')

# Days a validity start may trail the reference date before it is taken to
# belong to the following month
_MONTH_ROLL_DAYS = 7


def _parse_window(token: str) -> Optional[ValidityWindow]:
    match = _WINDOW_RE.match(token)
    if not match:
        return None
    start_day, start_hour, end_day, end_hour = (int(g) for g in match.groups())
    return ValidityWindow(start_day, start_hour, end_day, end_hour)


def parse_validity(text: str) -> Optional[ValidityWindow]:
    """First ``DDHH/DDHH`` window in a TAF, or None."""
    for token in tokenize(text):
        window = _parse_window(token)
        if window is not None:
            return window
    return None


@dataclass
class _Marker:
    """A change group found in the body, with its time as coded."""

    kind: SegmentKind
    position: int
    condition_start: int
    label: str
    fm_time: Optional[Tuple[int, int, int]] = None
    window: Optional[ValidityWindow] = None
    probability: Optional[int] = None

    def offsets(self, validity: ValidityWindow) -> Tuple[int, Optional[int]]:
        """Start and end offsets in minutes; FM has no end of its own."""
        if self.fm_time is not None:
            return validity.offset_minutes(*self.fm_time), None
        return (
            validity.offset_minutes(self.window.start_day, self.window.start_hour),
            validity.offset_minutes(self.window.end_day, self.window.end_hour),
        )


class AnchoredSegment(NamedTuple):
    segment: ForecastSegment
    start: datetime
    end: datetime


class TafSegmenter:
    """
    Build a TafTimeline from raw TAF text.

    Pure: no state is kept between calls.
    """

    @classmethod
    def segment(cls, raw_text: Optional[str]) -> TafTimeline:
        """
        Segment a TAF into its forecast timeline.

        Args:
            raw_text: Raw TAF text, possibly spread over several lines

        Returns:
            TafTimeline. Without a validity window the timeline has no
            segments, zero total and a descriptive label; its change groups
            are still listed.
        """
        tokens = tokenize(raw_text)

        validity_index = None
        window = None
        for index, token in enumerate(tokens):
            window = _parse_window(token)
            if window is not None:
                validity_index = index
                break

        if window is None:
            logger.debug("No validity window in TAF: %s", (raw_text or "")[:80])
            return TafTimeline(
                validity_label=NO_VALIDITY_LABEL,
                change_groups=cls._change_groups(tokens, cls._find_markers(tokens)),
            )

        total = window.total_minutes
        if total <= 0:
            logger.warning(
                "TAF validity %s ends before it starts (month rollover is not handled)",
                tokens[validity_index],
            )

        body = tokens[validity_index + 1:]
        markers = cls._find_markers(body)

        return TafTimeline(
            segments=cls._build_segments(body, markers, window),
            total_offset_minutes=total,
            validity_label=window.label,
            validity=window,
            change_groups=cls._change_groups(body, markers),
        )

    @classmethod
    def _find_markers(cls, body: Sequence[str]) -> List[_Marker]:
        """Locate FM, BECMG, TEMPO and PROB groups in the forecast body."""
        markers = []
        i = 0
        while i < len(body):
            token = body[i]

            fm = _FM_RE.match(token)
            if fm:
                markers.append(_Marker(
                    kind=SegmentKind.FM,
                    position=i,
                    condition_start=i + 1,
                    label=token,
                    fm_time=tuple(int(g) for g in fm.groups()),
                ))
                i += 1
                continue

            if token in ("BECMG", "TEMPO"):
                span = cls._window_at(body, i + 1)
                if span is not None:
                    markers.append(_Marker(
                        kind=SegmentKind(token),
                        position=i,
                        condition_start=i + 2,
                        label=f"{token} {body[i + 1]}",
                        window=span,
                    ))
                    i += 2
                    continue

            prob = _PROB_RE.match(token)
            if prob:
                qualifier = token
                j = i + 1
                if j < len(body) and body[j] == "TEMPO":
                    qualifier = f"{token} TEMPO"
                    j += 1
                span = cls._window_at(body, j)
                if span is not None:
                    markers.append(_Marker(
                        kind=SegmentKind.PROB,
                        position=i,
                        condition_start=j + 1,
                        label=f"{qualifier} {body[j]}",
                        window=span,
                        probability=int(prob.group(1)),
                    ))
                    i = j + 1
                    continue

            i += 1
        return markers

    @staticmethod
    def _window_at(body: Sequence[str], index: int) -> Optional[ValidityWindow]:
        if index >= len(body):
            return None
        return _parse_window(body[index])

    @staticmethod
    def _conditions(body: Sequence[str], markers: List[_Marker], n: int) -> Sequence[str]:
        """Tokens after marker n up to the next marker."""
        end = markers[n + 1].position if n + 1 < len(markers) else len(body)
        return body[markers[n].condition_start:end]

    @classmethod
    def _change_groups(cls, body: Sequence[str], markers: List[_Marker]) -> List[ChangeGroup]:
        return [
            ChangeGroup(
                kind=marker.kind,
                label=marker.label,
                condition_text=" ".join(cls._conditions(body, markers, n)),
                probability=marker.probability,
            )
            for n, marker in enumerate(markers)
        ]

    @classmethod
    def _build_segments(
        cls,
        body: Sequence[str],
        markers: List[_Marker],
        validity: ValidityWindow,
    ) -> List[ForecastSegment]:
        total = validity.total_minutes
        offsets = [marker.offsets(validity) for marker in markers]
        fm_starts = [
            start for marker, (start, _) in zip(markers, offsets)
            if marker.kind == SegmentKind.FM
        ]
        first_marker = markers[0].position if markers else len(body)

        candidates = [
            cls._make_segment(
                SegmentKind.BASE,
                0,
                fm_starts[0] if fm_starts else total,
                "BASE",
                body[:first_marker],
                total,
            )
        ]

        fm_index = 0
        for n, marker in enumerate(markers):
            start, end = offsets[n]
            if marker.kind == SegmentKind.FM:
                fm_index += 1
                end = fm_starts[fm_index] if fm_index < len(fm_starts) else total
            candidates.append(cls._make_segment(
                marker.kind,
                start,
                end,
                marker.label,
                cls._conditions(body, markers, n),
                total,
                probability=marker.probability,
            ))

        segments = []
        for segment in candidates:
            if segment.end_offset_minutes <= segment.start_offset_minutes:
                logger.debug("Dropping degenerate TAF segment %s", segment.label)
                continue
            segments.append(segment)

        # stable: BASE first, then change groups in source order on ties
        segments.sort(key=lambda s: s.start_offset_minutes)
        return segments

    @staticmethod
    def _make_segment(
        kind: SegmentKind,
        start: int,
        end: int,
        label: str,
        tokens: Sequence[str],
        total: int,
        probability: Optional[int] = None,
    ) -> ForecastSegment:
        visibility = scan_visibility(tokens)
        layers = cloud_layers(tokens)
        ceiling = ceiling_of(layers)
        return ForecastSegment(
            kind=kind,
            start_offset_minutes=max(0, start),
            end_offset_minutes=min(total, end),
            label=label,
            condition_text=" ".join(tokens),
            visibility_meters=visibility,
            ceiling_ft=ceiling,
            category=classify(visibility, ceiling),
            probability=probability,
            clouds=layers,
        )


def segment_taf(raw_text: Optional[str]) -> TafTimeline:
    """Segment a raw TAF into its forecast timeline. See TafSegmenter.segment."""
    return TafSegmenter.segment(raw_text)


def resolve_validity_start(window: ValidityWindow, reference: datetime) -> datetime:
    """
    Place the validity start on the calendar relative to a reference time.

    The start day is taken in the reference month, or in the next month
    when it trails the reference day by more than a week (a TAF issued on
    the 31st for the 1st).
    """
    month_start = reference.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if window.start_day + _MONTH_ROLL_DAYS < reference.day:
        month_start += relativedelta(months=1)
    return month_start + timedelta(days=window.start_day - 1, hours=window.start_hour)


def anchor_timeline(timeline: TafTimeline, reference: datetime) -> List[AnchoredSegment]:
    """
    Attach calendar times to each segment for display.

    Offsets are left untouched; this only adds them to the resolved
    validity start.

    Args:
        timeline: Segmented TAF
        reference: Current time (or the TAF issue time), same timezone
            convention as the desired output

    Returns:
        One AnchoredSegment per segment, empty when the timeline has no
        validity window
    """
    if timeline.validity is None:
        return []
    start = resolve_validity_start(timeline.validity, reference)
    return [
        AnchoredSegment(
            segment=segment,
            start=start + timedelta(minutes=segment.start_offset_minutes),
            end=start + timedelta(minutes=segment.end_offset_minutes),
        )
        for segment in timeline.segments
    ]
