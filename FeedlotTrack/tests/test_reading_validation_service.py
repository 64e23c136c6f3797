"""
Tests for the score-trajectory alerts
"""
from decimal import Decimal

from enums.enums import FaseDietaEnum as Fase
from services.reading_validation_service import validate_reading


class TestValidateReading:
    def test_stable_reading_has_no_alerts(self):
        assert validate_reading(Fase.adaptacao_crescimento, Decimal("1"), [Decimal("0.5")]) == []

    def test_first_reading_has_no_history(self):
        assert validate_reading(Fase.adaptacao_crescimento, Decimal("1"), None) == []

    def test_large_jump(self):
        alertas = validate_reading(Fase.adaptacao_crescimento, Decimal("2"), [Decimal("0")])
        assert any("Variação brusca" in a for a in alertas)

    def test_extreme_score_repeated(self):
        alertas = validate_reading(Fase.adaptacao_crescimento, Decimal("3"), [Decimal("3")])
        assert any("Nota extrema" in a for a in alertas)

    def test_missing_day_breaks_the_sequence(self):
        alertas = validate_reading(Fase.adaptacao_crescimento, Decimal("3"), [None, Decimal("3")])
        assert not any("Nota extrema" in a for a in alertas)

    def test_minus_two_twice(self):
        alertas = validate_reading(Fase.adaptacao_crescimento, Decimal("-2"), [Decimal("-2")])
        assert any("dois dias seguidos" in a for a in alertas)
        assert any("Aumento maior que 10%" in a for a in alertas)

    def test_negative_score_in_finishing(self):
        alertas = validate_reading(Fase.terminacao, Decimal("-0.5"), [])
        assert any("terminação" in a for a in alertas)

    def test_accepts_plain_numbers(self):
        assert validate_reading(Fase.terminacao, 1, [1.5]) == []
