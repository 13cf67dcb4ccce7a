"""
Round settlement tests
Covers: validation, balance / rollover bookkeeping, rollback, concurrency
"""
import threading
from decimal import Decimal
from unittest import mock

import pytest
from django.db import DatabaseError, connection

from scratch.exceptions import (
    ImmutableRoundError,
    InsufficientFunds,
    InvalidBet,
    NotFound,
    StorageFailure,
)
from scratch.models import GameRound
from scratch.services import normalize_bet, play_round, read_rtp
from sa_conf.services import set_setting
from wallets.models import Wallet

from conftest import wallet_of

LOSE = 0.99
ONE_X = 0.3


def rtp_of(value):
    return lambda key: value


@pytest.mark.django_db
class TestValidation:
    """Rejected rounds leave no trace"""

    @pytest.mark.parametrize("bet", ["0.49", "4.00", "100", "-1", "abc", None, "NaN", "Infinity"])
    def test_invalid_bet(self, make_user, bet):
        user = make_user(balance="100.00")
        with pytest.raises(InvalidBet) as exc:
            play_round(user.id, bet)
        assert Decimal("0.50") in exc.value.allowed_bets
        assert wallet_of(user).balance == Decimal("100.00")
        assert GameRound.objects.count() == 0

    def test_bet_matched_to_the_cent(self):
        assert normalize_bet("0.5") == Decimal("0.50")
        assert normalize_bet(1.499) == Decimal("1.50")
        assert normalize_bet(50) == Decimal("50.00")

    def test_unknown_user(self):
        with pytest.raises(NotFound):
            play_round(999999, "1.00")
        assert GameRound.objects.count() == 0

    def test_insufficient_balance(self, make_user):
        user = make_user(balance="0.99")
        with pytest.raises(InsufficientFunds):
            play_round(user.id, "1.00")
        assert wallet_of(user).balance == Decimal("0.99")
        assert GameRound.objects.count() == 0

    def test_invalid_bet_checked_before_user(self):
        with pytest.raises(InvalidBet):
            play_round(999999, "0.01")


@pytest.mark.django_db
class TestSettlement:
    """Balance, rollover and round record move together"""

    def test_first_deposit_scenario(self, make_user):
        user = make_user(balance="500.00", rollover="500.00", first_deposit_made=True)

        result = play_round(user.id, "10.00", get_setting=rtp_of("95.0"), draw=ONE_X)

        assert result.prize == Decimal("10.00")
        assert result.final_balance == Decimal("500.00")
        wallet = wallet_of(user)
        assert wallet.balance == Decimal("500.00")
        assert wallet.rollover_required == Decimal("490.00")

    def test_losing_round(self, make_user):
        user = make_user(balance="20.00")

        result = play_round(user.id, "5.00", get_setting=rtp_of("95"), draw=LOSE)

        assert result.prize == Decimal("0.00")
        assert result.multiplier == Decimal("0")
        assert wallet_of(user).balance == Decimal("15.00")

    def test_winning_round_with_scaled_rtp(self, make_user):
        user = make_user(balance="2.00")

        result = play_round(user.id, "2.00", get_setting=rtp_of("76"), draw=0.0)

        assert result.multiplier == Decimal("8.0000")
        assert result.prize == Decimal("16.00")
        assert wallet_of(user).balance == Decimal("16.00")

    def test_rollover_floors_at_zero(self, make_user):
        user = make_user(balance="50.00", rollover="3.00")
        play_round(user.id, "5.00", draw=LOSE)
        assert wallet_of(user).rollover_required == Decimal("0.00")

    def test_rollover_never_increases(self, make_user):
        user = make_user(balance="50.00", rollover="0.00")
        play_round(user.id, "50.00", draw=0.0)
        assert wallet_of(user).rollover_required == Decimal("0.00")

    def test_round_record(self, make_user):
        user = make_user(balance="10.00")

        result = play_round(user.id, "1.00", get_setting=rtp_of("90.0"), draw=0.1)

        game_round = GameRound.objects.get(pk=result.round_id)
        assert game_round.user_id == user.id
        assert game_round.game_type == "scratch_card"
        assert game_round.bet_amount == Decimal("1.00")
        assert game_round.prize_amount == result.prize
        assert game_round.multiplier == Decimal("1.8947")
        assert game_round.result_data == {"rtp": 90.0, "base_multiplier": 2}

    def test_as_dict(self, make_user):
        user = make_user(balance="10.00")
        data = play_round(user.id, "1.00", draw=LOSE).as_dict()
        assert data["success"] is True
        assert set(data) == {"success", "prize", "finalBalance", "multiplier", "betAmount", "roundId"}
        assert data["finalBalance"] == Decimal("9.00")

    def test_balance_never_negative(self, make_user):
        user = make_user(balance="3.00")
        for _ in range(6):
            try:
                play_round(user.id, "1.00", draw=LOSE)
            except InsufficientFunds:
                pass
            assert wallet_of(user).balance >= 0
        assert wallet_of(user).balance == Decimal("0.00")
        assert GameRound.objects.filter(user=user).count() == 3


@pytest.mark.django_db
class TestRtpSetting:
    """RTP comes from the settings table"""

    def test_missing_defaults_to_95(self):
        assert read_rtp(lambda key: None) == Decimal("95.0")

    def test_unparsable_falls_back(self, caplog):
        assert read_rtp(lambda key: "lots") == Decimal("95.0")
        assert "Unparsable" in caplog.text

    def test_reads_settings_table(self, make_user):
        set_setting("rtp_percentage", "57.0")
        user = make_user(balance="10.00")

        result = play_round(user.id, "1.00", draw=0.3)

        # 1 * 57 / 95 = 0.6
        assert result.prize == Decimal("0.60")


@pytest.mark.django_db
class TestAtomicity:
    """A failure anywhere in the unit leaves no partial effect"""

    def test_round_insert_failure_rolls_back(self, make_user):
        user = make_user(balance="10.00", rollover="10.00")

        with mock.patch.object(GameRound.objects, "create", side_effect=DatabaseError("disk full")):
            with pytest.raises(StorageFailure):
                play_round(user.id, "5.00", draw=0.0)

        wallet = wallet_of(user)
        assert wallet.balance == Decimal("10.00")
        assert wallet.rollover_required == Decimal("10.00")
        assert GameRound.objects.count() == 0

    def test_setting_failure_rolls_back(self, make_user):
        user = make_user(balance="10.00")

        def broken(key):
            raise DatabaseError("settings table gone")

        with pytest.raises(StorageFailure):
            play_round(user.id, "1.00", get_setting=broken)

        assert wallet_of(user).balance == Decimal("10.00")
        assert GameRound.objects.count() == 0


@pytest.mark.django_db
class TestImmutableRounds:
    """Round history is append-only"""

    def test_update_rejected(self, make_user):
        user = make_user(balance="10.00")
        game_round = GameRound.objects.get(pk=play_round(user.id, "1.00", draw=LOSE).round_id)

        game_round.prize_amount = Decimal("999.00")
        with pytest.raises(ImmutableRoundError):
            game_round.save()

    def test_delete_rejected(self, make_user):
        user = make_user(balance="10.00")
        game_round = GameRound.objects.get(pk=play_round(user.id, "1.00", draw=LOSE).round_id)

        with pytest.raises(ImmutableRoundError):
            game_round.delete()
        assert GameRound.objects.filter(pk=game_round.pk).exists()


@pytest.mark.django_db(transaction=True)
class TestConcurrentRounds:
    """Concurrent rounds for one player serialize on the wallet row"""

    THREADS = 6

    def _run_concurrently(self, fn):
        barrier = threading.Barrier(self.THREADS)
        outcomes = []
        lock = threading.Lock()

        def worker():
            try:
                barrier.wait()
                value = fn()
            except Exception as e:  # noqa: BLE001
                value = e
            finally:
                connection.close()
            with lock:
                outcomes.append(value)

        threads = [threading.Thread(target=worker) for _ in range(self.THREADS)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        return outcomes

    def test_single_bet_balance_covers_one_round(self, make_user):
        user = make_user(balance="1.00")

        outcomes = self._run_concurrently(lambda: play_round(user.id, "1.00", draw=LOSE))

        successes = [o for o in outcomes if not isinstance(o, Exception)]
        failures = [o for o in outcomes if isinstance(o, Exception)]
        assert len(successes) == 1
        assert all(isinstance(f, InsufficientFunds) for f in failures)
        assert Wallet.objects.get(user=user).balance == Decimal("0.00")
        assert GameRound.objects.filter(user=user).count() == 1

    def test_no_lost_updates(self, make_user):
        user = make_user(balance="100.00", rollover="100.00")

        outcomes = self._run_concurrently(lambda: play_round(user.id, "5.00", draw=LOSE))

        assert not [o for o in outcomes if isinstance(o, Exception)]
        wallet = Wallet.objects.get(user=user)
        assert wallet.balance == Decimal("100.00") - 5 * self.THREADS
        assert wallet.rollover_required == Decimal("100.00") - 5 * self.THREADS
        assert GameRound.objects.filter(user=user).count() == self.THREADS
