"""Tests for cloud layer parsing and ceiling derivation."""

from ari_wx.weather.clouds import parse_cloud_layer, cloud_layers, ceiling_of
from ari_wx.weather.models import CloudLayer


class TestParseCloudLayer:

    def test_basic_layer(self):
        layer = parse_cloud_layer("BKN025")
        assert layer.kind == "BKN"
        assert layer.height_hundreds_ft == 25
        assert layer.height_ft == 2500
        assert layer.is_ceiling

    def test_cb_suffix(self):
        layer = parse_cloud_layer("OVC008CB")
        assert layer.cloud_type == "CB"
        assert layer.height_ft == 800

    def test_vertical_visibility_is_ceiling(self):
        assert parse_cloud_layer("VV002").is_ceiling

    def test_few_sct_not_ceiling(self):
        assert not parse_cloud_layer("FEW015").is_ceiling
        assert not parse_cloud_layer("SCT030").is_ceiling

    def test_height_must_be_three_digits(self):
        assert parse_cloud_layer("BKN25") is None
        assert parse_cloud_layer("BKN0250") is None
        assert parse_cloud_layer("BKN///") is None
        assert parse_cloud_layer("NSC") is None


class TestCeiling:

    def test_lowest_broken_or_overcast(self):
        assert ceiling_of(["FEW015", "BKN025", "OVC040"]) == 2500

    def test_no_ceiling(self):
        assert ceiling_of(["FEW015", "SCT030"]) is None
        assert ceiling_of([]) is None

    def test_order_irrelevant(self):
        assert ceiling_of(["OVC040", "BKN025", "FEW015"]) == 2500

    def test_from_condition_text(self):
        assert ceiling_of("4000 -RA SCT010 BKN020") == 2000

    def test_from_parsed_layers(self):
        layers = [CloudLayer("OVC", 12), CloudLayer("VV", 3)]
        assert ceiling_of(layers) == 300

    def test_ignores_other_tokens(self):
        assert ceiling_of(["34010KT", "9999", "BKN020", "12/05"]) == 2000

    def test_idempotent(self):
        tokens = ["FEW015", "BKN025", "OVC040"]
        assert ceiling_of(tokens) == ceiling_of(tokens)
        assert cloud_layers(tokens) == cloud_layers(tokens)
        assert tokens == ["FEW015", "BKN025", "OVC040"]

    def test_layers_keep_source_order(self):
        kinds = [layer.kind for layer in cloud_layers("OVC040 FEW015 BKN025")]
        assert kinds == ["OVC", "FEW", "BKN"]
