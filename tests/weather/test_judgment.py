"""Tests for the GREEN/AMBER/RED risk judgment."""

from ari_wx.weather.judgment import assess_taf_convection, judge, judge_briefing
from ari_wx.weather.models import CloudLayer, RiskLevel
from ari_wx.weather.parser import WeatherParser
from ari_wx.weather.taf_timeline import segment_taf

BASE_TAF = "TAF RJTT 010500Z 0106/0212 34010KT 9999 FEW030 "


class TestJudge:

    def test_low_ceiling_is_amber(self):
        judgment = judge(["BKN020"])
        assert judgment.level == RiskLevel.AMBER
        assert len(judgment.reasons) == 1
        assert "2000ft" in judgment.reasons[0]
        assert judgment.ceiling_ft == 2000

    def test_reason_text(self):
        assert judge(["OVC008"]).reasons == ["Ceiling present (<3000ft): 800ft"]

    def test_high_ceiling_is_green(self):
        judgment = judge(["SCT250"])
        assert judgment.level == RiskLevel.GREEN
        assert judgment.reasons == []
        assert judgment.ceiling_ft is None

    def test_threshold_is_strict(self):
        assert judge(["OVC030"]).level == RiskLevel.GREEN
        assert judge(["OVC029"]).level == RiskLevel.AMBER

    def test_condition_text(self):
        assert judge("FEW015 BKN025").ceiling_ft == 2500

    def test_parsed_layers(self):
        assert judge([CloudLayer("VV", 2)]).level == RiskLevel.AMBER

    def test_precomputed_ceiling(self):
        judgment = judge(ceiling_ft=1200)
        assert judgment.level == RiskLevel.AMBER
        assert judgment.ceiling_ft == 1200

    def test_nothing_known(self):
        judgment = judge()
        assert judgment.level == RiskLevel.GREEN
        assert judgment.reasons == []


class TestTafConvection:

    def test_tempo_thunderstorm_is_red(self):
        judgment = assess_taf_convection(segment_taf(BASE_TAF + "TEMPO 0108/0112 TSRA BKN020CB"))
        assert judgment.level == RiskLevel.RED
        assert judgment.reasons == ["TAF TEMPO includes TS/CB (TEMPO 0108/0112)"]

    def test_prob_tempo_is_amber(self, full_taf):
        judgment = assess_taf_convection(segment_taf(full_taf))
        assert judgment.level == RiskLevel.AMBER
        assert judgment.reasons == ["TAF PROB TEMPO includes TS/CB (PROB30 TEMPO 0204/0206)"]

    def test_fm_thunderstorm_is_amber(self):
        judgment = assess_taf_convection(segment_taf(BASE_TAF + "FM011800 25015KT 6000 TS SCT030CB"))
        assert judgment.level == RiskLevel.AMBER
        assert judgment.reasons[0].startswith("TAF trend (FM/BECMG)")
        assert "FM011800" in judgment.reasons[0]

    def test_prob_without_tempo_not_flagged(self):
        judgment = assess_taf_convection(segment_taf(BASE_TAF + "PROB30 0110/0114 TSRA"))
        assert judgment.level == RiskLevel.GREEN

    def test_base_thunderstorm_not_flagged(self):
        judgment = assess_taf_convection(segment_taf(BASE_TAF + "VCTS"))
        assert judgment.level == RiskLevel.GREEN

    def test_red_keeps_other_reasons(self):
        judgment = assess_taf_convection(segment_taf(
            BASE_TAF + "TEMPO 0108/0112 TSRA BECMG 0114/0116 SCT030CB"
        ))
        assert judgment.level == RiskLevel.RED
        assert len(judgment.reasons) == 2

    def test_empty_timeline(self):
        assert assess_taf_convection(segment_taf("TAF RJTT NIL")).level == RiskLevel.GREEN


class TestJudgeBriefing:

    def test_metar_and_taf(self):
        metar = WeatherParser.parse_metar("METAR RJTT 010500Z 34010KT 9999 BKN020 12/05 Q1013")
        taf = WeatherParser.parse_taf(BASE_TAF + "TEMPO 0108/0112 TSRA BKN020CB")

        judgment = judge_briefing(metar, taf)

        assert judgment.level == RiskLevel.RED
        assert judgment.reasons[0] == "Ceiling present (<3000ft): 2000ft"
        assert len(judgment.reasons) == 2
        assert judgment.ceiling_ft == 2000

    def test_missing_reports(self):
        judgment = judge_briefing(None, None)
        assert judgment.level == RiskLevel.GREEN
        assert judgment.reasons == []


class TestConvectionOffTimeline:

    def test_month_rollover_tempo_is_red(self):
        timeline = segment_taf(
            "TAF RJTT 311700Z 3118/0124 34010KT 9999 FEW030 TEMPO 0102/0106 TSRA BKN020CB"
        )
        judgment = assess_taf_convection(timeline)
        assert judgment.level == RiskLevel.RED
        assert judgment.reasons == ["TAF TEMPO includes TS/CB (TEMPO 0102/0106)"]

    def test_tempo_outside_validity_is_red(self):
        timeline = segment_taf(BASE_TAF + "TEMPO 0302/0306 TSRA")
        assert timeline.overlays() == []
        assert assess_taf_convection(timeline).level == RiskLevel.RED

    def test_fm_without_validity_is_amber(self):
        timeline = segment_taf("TAF RJTT 010500Z 34010KT 9999 FM011800 25015KT TSRA")
        assert assess_taf_convection(timeline).level == RiskLevel.AMBER

    def test_briefing_with_month_rollover(self):
        taf = WeatherParser.parse_taf(
            "TAF RJTT 311700Z 3118/0124 34010KT 9999 FEW030 TEMPO 0102/0106 TSRA"
        )
        assert judge_briefing(None, taf).level == RiskLevel.RED
