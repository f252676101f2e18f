"""Tests for TAF validity parsing and timeline segmentation."""

from datetime import datetime, timezone

from ari_wx.weather.models import FlightCategory, SegmentKind, ValidityWindow
from ari_wx.weather.taf_timeline import (
    NO_VALIDITY_LABEL,
    anchor_timeline,
    parse_validity,
    resolve_validity_start,
    segment_taf,
)


def _spans(timeline):
    return [(s.label, s.start_offset_minutes, s.end_offset_minutes) for s in timeline.segments]


class TestValidity:

    def test_parse_validity(self):
        assert parse_validity("TAF RJTT 010500Z 0106/0212 34010KT") == ValidityWindow(1, 6, 2, 12)

    def test_no_validity(self):
        assert parse_validity("TAF RJTT 010500Z 34010KT") is None

    def test_total_and_label(self, full_taf):
        timeline = segment_taf(full_taf)
        assert timeline.total_offset_minutes == 1800
        assert timeline.validity_label == "01/06Z - 02/12Z"
        assert timeline.is_available


class TestSegmentation:

    def test_all_change_groups(self, full_taf):
        timeline = segment_taf(full_taf)

        assert _spans(timeline) == [
            ("BASE", 0, 720),
            ("TEMPO 0108/0112", 120, 360),
            ("FM011800", 720, 1800),
            ("BECMG 0200/0202", 1080, 1200),
            ("PROB30 TEMPO 0204/0206", 1320, 1440),
        ]

    def test_segment_conditions(self, full_taf):
        base, tempo, fm, becmg, prob = segment_taf(full_taf).segments

        assert base.kind == SegmentKind.BASE
        assert base.condition_text == "34010KT 9999 FEW030"
        assert base.category == FlightCategory.VFR

        assert tempo.kind == SegmentKind.TEMPO
        assert tempo.visibility_meters == 4000
        assert tempo.ceiling_ft == 2000
        assert tempo.category == FlightCategory.MVFR

        assert fm.condition_text == "18005KT CAVOK"
        assert fm.visibility_meters == 9999
        assert fm.category == FlightCategory.VFR

        assert becmg.ceiling_ft == 800
        assert becmg.category == FlightCategory.IFR

        assert prob.kind == SegmentKind.PROB
        assert prob.probability == 30
        assert prob.visibility_meters is None
        assert prob.ceiling_ft == 1500
        assert prob.clouds[0].cloud_type == "CB"

    def test_ordered_and_non_degenerate(self, full_taf):
        segments = segment_taf(full_taf).segments
        starts = [s.start_offset_minutes for s in segments]
        assert starts == sorted(starts)
        for segment in segments:
            assert 0 <= segment.start_offset_minutes < segment.end_offset_minutes <= 1800

    def test_baseline_covers_validity(self, full_taf):
        baseline = segment_taf(full_taf).baseline()
        assert baseline[0].start_offset_minutes == 0
        assert baseline[-1].end_offset_minutes == 1800
        for previous, current in zip(baseline, baseline[1:]):
            assert previous.end_offset_minutes == current.start_offset_minutes

    def test_overlays_do_not_interrupt_base(self):
        timeline = segment_taf(
            "TAF EGLL 011100Z 0112/0218 27010KT 9999 SCT030 "
            "TEMPO 0114/0118 4000 SHRA BKN012 BECMG 0200/0203 BKN008"
        )
        base = timeline.baseline()
        assert len(base) == 1
        assert (base[0].start_offset_minutes, base[0].end_offset_minutes) == (0, 1800)
        assert [s.kind for s in timeline.overlays()] == [SegmentKind.TEMPO, SegmentKind.BECMG]

    def test_no_change_groups(self):
        timeline = segment_taf("TAF KJFK 011130Z 0112/0218 18010KT P6SM SCT050")
        assert _spans(timeline) == [("BASE", 0, 1800)]
        assert timeline.segments[0].visibility_meters == 9656
        assert timeline.segments[0].category == FlightCategory.VFR

    def test_multiple_fm_groups(self):
        timeline = segment_taf(
            "TAF KJFK 011130Z 0112/0218 18010KT P6SM SCT050 "
            "FM011800 20012KT 5SM BR OVC015 FM020600 22008KT P6SM BKN040"
        )
        assert _spans(timeline) == [
            ("BASE", 0, 360),
            ("FM011800", 360, 1080),
            ("FM020600", 1080, 1800),
        ]
        assert timeline.segments[1].category == FlightCategory.MVFR

    def test_fm_with_minutes(self):
        timeline = segment_taf("TAF KJFK 011130Z 0112/0218 18010KT P6SM FM011830 OVC004")
        assert _spans(timeline)[1] == ("FM011830", 390, 1800)
        assert timeline.segments[1].category == FlightCategory.LIFR

    def test_prob_without_tempo(self):
        timeline = segment_taf("TAF LFPG 011100Z 0112/0218 24010KT 9999 PROB40 0114/0116 0800 FG")
        prob = timeline.segments[1]
        assert prob.label == "PROB40 0114/0116"
        assert prob.probability == 40
        assert prob.visibility_meters == 800
        assert prob.category == FlightCategory.LIFR

    def test_change_group_without_window_is_plain_text(self):
        timeline = segment_taf("TAF RJTT 010500Z 0106/0212 34010KT 9999 TEMPO 4000 RA")
        assert len(timeline.segments) == 1
        assert timeline.segments[0].condition_text == "34010KT 9999 TEMPO 4000 RA"

    def test_fm_before_validity_is_clamped(self):
        timeline = segment_taf("TAF RJTT 010200Z 0106/0212 BKN010 FM010300 OVC005")
        assert _spans(timeline) == [("FM010300", 0, 1800)]
        assert timeline.segments[0].category == FlightCategory.IFR

    def test_overlay_past_validity_is_clamped(self):
        timeline = segment_taf("TAF RJTT 010500Z 0106/0212 9999 TEMPO 0210/0216 3000 BR")
        assert _spans(timeline)[1] == ("TEMPO 0210/0216", 1680, 1800)

    def test_degenerate_window_dropped(self):
        timeline = segment_taf("TAF RJTT 010500Z 0106/0212 9999 BECMG 0110/0110 BKN010")
        assert [s.kind for s in timeline.segments] == [SegmentKind.BASE]

    def test_hour_24(self):
        timeline = segment_taf("TAF RJTT 010500Z 0106/0212 9999 TEMPO 0120/0124 SHRA")
        assert _spans(timeline)[1] == ("TEMPO 0120/0124", 840, 1080)

    def test_multi_line_and_lower_case(self, full_taf):
        assert _spans(segment_taf(full_taf.lower())) == _spans(segment_taf(full_taf))
        assert _spans(segment_taf(" ".join(full_taf.split()))) == _spans(segment_taf(full_taf))

    def test_idempotent(self, full_taf):
        assert segment_taf(full_taf) == segment_taf(full_taf)


class TestMissingOrBrokenValidity:

    def test_no_validity_window(self):
        timeline = segment_taf("TAF RJTT 010500Z 34010KT 9999 FEW030")
        assert timeline.segments == []
        assert timeline.total_offset_minutes == 0
        assert timeline.validity_label == NO_VALIDITY_LABEL
        assert not timeline.is_available

    def test_empty(self):
        assert segment_taf("").segments == []
        assert segment_taf(None).validity_label == NO_VALIDITY_LABEL

    def test_month_rollover_gives_negative_total(self):
        timeline = segment_taf("TAF RJTT 311700Z 3118/0124 34010KT 9999 FEW030")
        assert timeline.total_offset_minutes < 0
        assert timeline.segments == []
        assert timeline.validity_label == "31/18Z - 01/24Z"


class TestAnchoring:

    def test_resolve_in_reference_month(self):
        reference = datetime(2026, 1, 1, 5, 0, tzinfo=timezone.utc)
        start = resolve_validity_start(ValidityWindow(1, 6, 2, 12), reference)
        assert start == datetime(2026, 1, 1, 6, 0, tzinfo=timezone.utc)

    def test_resolve_next_month(self):
        reference = datetime(2026, 1, 31, 20, 0, tzinfo=timezone.utc)
        start = resolve_validity_start(ValidityWindow(1, 0, 2, 6), reference)
        assert start == datetime(2026, 2, 1, 0, 0, tzinfo=timezone.utc)

    def test_anchor_timeline(self, full_taf):
        timeline = segment_taf(full_taf)
        anchored = anchor_timeline(timeline, datetime(2026, 1, 1, 5, 0, tzinfo=timezone.utc))

        assert len(anchored) == len(timeline.segments)
        tempo = anchored[1]
        assert tempo.segment.label == "TEMPO 0108/0112"
        assert tempo.start == datetime(2026, 1, 1, 8, 0, tzinfo=timezone.utc)
        assert tempo.end == datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
        assert anchored[-1].end == datetime(2026, 1, 2, 6, 0, tzinfo=timezone.utc)
        assert tempo.segment.start_offset_minutes == 120

    def test_anchor_without_validity(self):
        timeline = segment_taf("TAF RJTT 010500Z 34010KT")
        assert anchor_timeline(timeline, datetime(2026, 1, 1, tzinfo=timezone.utc)) == []


class TestChangeGroups:

    def test_listed_in_source_order(self, full_taf):
        groups = segment_taf(full_taf).change_groups
        assert [g.label for g in groups] == [
            "TEMPO 0108/0112",
            "FM011800",
            "BECMG 0200/0202",
            "PROB30 TEMPO 0204/0206",
        ]
        assert groups[0].condition_text == "4000 -RA BKN020"
        assert groups[3].probability == 30

    def test_kept_across_month_rollover(self):
        timeline = segment_taf(
            "TAF RJTT 311700Z 3118/0124 34010KT 9999 FEW030 TEMPO 0102/0106 TSRA BKN020CB"
        )
        assert timeline.segments == []
        assert len(timeline.change_groups) == 1
        assert timeline.change_groups[0].kind == SegmentKind.TEMPO
        assert timeline.change_groups[0].condition_text == "TSRA BKN020CB"

    def test_kept_when_segment_dropped(self):
        timeline = segment_taf("TAF RJTT 010500Z 0106/0212 9999 BECMG 0110/0110 BKN010")
        assert [s.kind for s in timeline.segments] == [SegmentKind.BASE]
        assert [g.label for g in timeline.change_groups] == ["BECMG 0110/0110"]

    def test_without_validity_window(self):
        timeline = segment_taf("TAF RJTT 010500Z 34010KT 9999 FM011800 25015KT TSRA")
        assert timeline.segments == []
        assert [g.label for g in timeline.change_groups] == ["FM011800"]

    def test_serialized(self, full_taf):
        data = segment_taf(full_taf).to_dict()
        assert data['change_groups'][1] == {
            'kind': 'FM',
            'label': 'FM011800',
            'condition_text': '18005KT CAVOK',
            'probability': None,
        }
