import pytest


@pytest.fixture
def icao_metar() -> str:
    return "METAR RJTT 010500Z 34010KT 9999 FEW015 BKN025 OVC040 12/05 Q1013"


@pytest.fixture
def us_metar() -> str:
    return "METAR KJFK 011151Z 18008KT 1 1/2SM BR OVC005 12/11 A3020 RMK AO2 SLP228"


@pytest.fixture
def full_taf() -> str:
    """Validity 0106/0212 with every change group kind."""
    return (
        "TAF RJTT 010500Z 0106/0212 34010KT 9999 FEW030\n"
        "      TEMPO 0108/0112 4000 -RA BKN020\n"
        "      FM011800 18005KT CAVOK\n"
        "      BECMG 0200/0202 3000 BR BKN008\n"
        "      PROB30 TEMPO 0204/0206 TSRA BKN015CB="
    )
