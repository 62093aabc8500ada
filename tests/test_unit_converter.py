import pytest

from inventory.calculators import UNIT_LABELS, Unit, UnitConverter, UnsupportedUnit


class TestToPieces:
    def test_piece_is_identity(self):
        assert UnitConverter.to_pieces(7, Unit.PIECE) == 7

    def test_pack_and_carton(self):
        assert UnitConverter.to_pieces(3, Unit.PACK, 12) == 36
        assert UnitConverter.to_pieces(2, Unit.CARTON, 12, 10) == 240

    def test_accepts_legacy_labels(self):
        assert UnitConverter.to_pieces(1, "Box", 12, 10) == 120
        assert UnitConverter.to_pieces(1, "dus", 12, 10) == 120
        assert UnitConverter.to_pieces(4, "pcs") == 4

    @pytest.mark.parametrize("ppp, ppc", [(None, None), (0, 10), (12, None), (12, 0)])
    def test_carton_without_ratios_is_unsupported(self, ppp, ppc):
        with pytest.raises(UnsupportedUnit) as exc:
            UnitConverter.to_pieces(1, Unit.CARTON, ppp, ppc)
        assert exc.value.unit is Unit.CARTON

    def test_pack_without_ratio_is_unsupported(self):
        with pytest.raises(UnsupportedUnit):
            UnitConverter.to_pieces(1, Unit.PACK, None, 10)

    def test_negative_quantity(self):
        with pytest.raises(ValueError):
            UnitConverter.to_pieces(-1, Unit.PIECE)

    @pytest.mark.parametrize("unit", list(Unit))
    def test_strictly_increasing_in_quantity(self, unit):
        counts = [UnitConverter.to_pieces(q, unit, 12, 10) for q in range(0, 50)]
        assert all(a < b for a, b in zip(counts, counts[1:]))

    @pytest.mark.parametrize("quantity", [2.5, "1.5", float("nan"), None, True])
    def test_fractional_or_non_numeric_quantity_rejected(self, quantity):
        with pytest.raises(ValueError):
            UnitConverter.to_pieces(quantity, Unit.PACK, 12, 10)

    def test_integral_float_accepted(self):
        assert UnitConverter.to_pieces(3.0, Unit.PACK, 12) == 36

    def test_unknown_unit(self):
        with pytest.raises(ValueError):
            UnitConverter.to_pieces(1, "crate", 12, 10)


class TestFromPieces:
    def test_full_decomposition(self):
        # 145 = 1*120 + 2*12 + 1; leftover pieces always stay below one pack
        assert UnitConverter.from_pieces(145, 12, 10) == {"cartons": 1, "packs": 2, "pieces": 1}

    def test_packs_only(self):
        assert UnitConverter.from_pieces(145, 12, None) == {"cartons": 0, "packs": 12, "pieces": 1}

    def test_no_ratios(self):
        assert UnitConverter.from_pieces(145) == {"cartons": 0, "packs": 0, "pieces": 145}

    def test_round_trip(self):
        for pieces in range(0, 400):
            parts = UnitConverter.from_pieces(pieces, 12, 10)
            rebuilt = (
                UnitConverter.to_pieces(parts["cartons"], Unit.CARTON, 12, 10)
                + UnitConverter.to_pieces(parts["packs"], Unit.PACK, 12, 10)
                + parts["pieces"]
            )
            assert rebuilt == pieces
            assert parts["packs"] < 10
            assert parts["pieces"] < 12

    def test_fractional_pieces_rejected(self):
        with pytest.raises(ValueError):
            UnitConverter.from_pieces(12.5, 12, 10)

    def test_negative_pieces(self):
        with pytest.raises(ValueError):
            UnitConverter.from_pieces(-5, 12, 10)


class TestDescribe:
    def test_zero_stock(self):
        assert UnitConverter.describe(0, 12, 10) == [(0, Unit.PIECE)]
        assert UnitConverter.format_quantity(0, 12, 10) == "0 Pcs"

    def test_skips_zero_terms(self):
        assert UnitConverter.describe(120, 12, 10) == [(1, Unit.CARTON)]
        assert UnitConverter.describe(133, 12, 10) == [(1, Unit.CARTON), (1, Unit.PACK), (1, Unit.PIECE)]

    def test_format_uses_display_labels(self):
        assert UnitConverter.format_quantity(145, 12, 10) == "1 Dus 2 Pack 1 Pcs"
        assert UNIT_LABELS[Unit.CARTON] == "Dus"


class TestAvailableUnits:
    def test_by_ratios(self):
        assert UnitConverter.available_units() == [Unit.PIECE]
        assert UnitConverter.available_units(12) == [Unit.PIECE, Unit.PACK]
        assert UnitConverter.available_units(12, 10) == [Unit.PIECE, Unit.PACK, Unit.CARTON]
        assert UnitConverter.available_units(None, 10) == [Unit.PIECE]
