"""
Prize engine tests
Covers: bonus tiers, cut points, RTP scaling, rounding
"""
from decimal import Decimal

import pytest

from scratch.engine import bonus_chance, compute_prize, thresholds


class TestBonusChance:
    """Bet size -> extra win probability"""

    @pytest.mark.parametrize(
        "bet, expected",
        [
            ("0.50", "0"),
            ("4.99", "0"),
            ("5.00", "0.03"),
            ("9.99", "0.03"),
            ("10.00", "0.06"),
            ("20.00", "0.09"),
            ("30.00", "0.12"),
            ("49.99", "0.12"),
            ("50.00", "0.15"),
        ],
    )
    def test_tiers(self, bet, expected):
        assert bonus_chance(Decimal(bet)) == Decimal(expected)

    def test_thresholds_without_bonus(self):
        assert thresholds(Decimal("1.00")) == (
            Decimal("0.02"), Decimal("0.07"), Decimal("0.22"), Decimal("0.50"),
        )

    def test_thresholds_for_top_bet(self):
        # b = 0.15
        assert thresholds(Decimal("50.00")) == (
            Decimal("0.0425"), Decimal("0.1150"), Decimal("0.2800"), Decimal("0.5225"),
        )


class TestComputePrize:
    """Band selection and payout"""

    @pytest.mark.parametrize(
        "draw, base",
        [
            (0, 10),
            (0.0199, 10),
            (0.02, 5),
            (0.0699, 5),
            (0.07, 2),
            (0.2199, 2),
            (0.22, 1),
            (0.4999, 1),
            (0.50, 0),
            (0.9999, 0),
        ],
    )
    def test_cut_points_are_exclusive(self, draw, base):
        result = compute_prize(Decimal("1.00"), Decimal("95.0"), draw=draw)
        assert result.base_multiplier == base

    def test_bonus_moves_cut_points(self):
        # 0.025 is a 5x draw for small bets, 10x once the bet earns the bonus
        assert compute_prize(Decimal("1.00"), Decimal("95"), draw=0.025).base_multiplier == 5
        assert compute_prize(Decimal("50.00"), Decimal("95"), draw=0.025).base_multiplier == 10

    def test_reference_rtp_pays_base_multiplier(self):
        result = compute_prize(Decimal("10.00"), Decimal("95.0"), draw=0.3)
        assert result.base_multiplier == 1
        assert result.multiplier == Decimal("1")
        assert result.prize_amount == Decimal("10.00")

    def test_rtp_scales_multiplier(self):
        result = compute_prize(Decimal("2.00"), Decimal("76.0"), draw=0.0)
        # 10 * 76 / 95 = 8
        assert result.multiplier == Decimal("8")
        assert result.prize_amount == Decimal("16.00")

    def test_prize_rounds_half_up_to_cents(self):
        # 1.50 * 2 * 96 / 95 = 3.0315... -> 3.03
        result = compute_prize(Decimal("1.50"), Decimal("96"), draw=0.1)
        assert result.base_multiplier == 2
        assert result.prize_amount == Decimal("3.03")

        # 0.50 * 1 * 99 / 95 = 0.52105... -> 0.52
        result = compute_prize(Decimal("0.50"), Decimal("99"), draw=0.3)
        assert result.prize_amount == Decimal("0.52")

    def test_losing_draw_pays_nothing(self):
        result = compute_prize(Decimal("5.00"), Decimal("99"), draw=0.99)
        assert result.multiplier == 0
        assert result.prize_amount == Decimal("0.00")

    def test_same_draw_same_result(self):
        a = compute_prize(Decimal("20.00"), Decimal("90"), draw=0.1)
        b = compute_prize(Decimal("20.00"), Decimal("90"), draw=0.1)
        assert a == b

    def test_random_draw_in_unit_interval(self):
        for _ in range(50):
            result = compute_prize(Decimal("1.00"), Decimal("95"))
            assert Decimal("0") <= result.draw < Decimal("1")
            assert result.base_multiplier in (0, 1, 2, 5, 10)
