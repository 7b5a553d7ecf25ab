"""Ledger: free claims, cooldown and user stats."""
from datetime import timedelta

import pytest

from conftest import START, get_user, make_user, race
from prediction_arena.core.errors import CooldownActive, NotFound


class TestClaimFree:
    def test_first_claim_credits_award(self, engine, ledger):
        user = make_user(engine, points=1000)

        result = ledger.claim_free(user.id)

        assert result.success
        assert result.points_awarded == 500
        assert result.balance == 1500
        assert result.next_claim_available == START + timedelta(hours=24)
        stored = get_user(engine, user.id)
        assert stored.points == 1500
        assert stored.last_claim_date == START

    def test_second_claim_within_cooldown_is_rejected(self, engine, ledger, clock):
        user = make_user(engine, points=1000)
        ledger.claim_free(user.id)
        clock.advance(hours=10)

        with pytest.raises(CooldownActive) as excinfo:
            ledger.claim_free(user.id)

        assert excinfo.value.remaining == timedelta(hours=14)
        assert excinfo.value.next_claim_available == START + timedelta(hours=24)
        assert excinfo.value.extra()["remaining_seconds"] == 14 * 3600
        assert get_user(engine, user.id).points == 1500

    def test_claim_allowed_once_cooldown_elapsed(self, engine, ledger, clock):
        user = make_user(engine, points=0)
        ledger.claim_free(user.id)
        clock.advance(hours=24)

        result = ledger.claim_free(user.id)

        assert result.balance == 1000
        assert get_user(engine, user.id).last_claim_date == START + timedelta(hours=24)

    def test_unknown_user(self, engine, ledger):
        with pytest.raises(NotFound):
            ledger.claim_free(12345)

    def test_concurrent_claims_credit_once(self, engine, ledger):
        user = make_user(engine, points=0)

        outcomes = race(6, lambda _: ledger.claim_free(user.id))

        assert sum(not isinstance(o, Exception) for o in outcomes) == 1
        assert all(isinstance(o, CooldownActive) for o in outcomes if isinstance(o, Exception))
        assert get_user(engine, user.id).points == 500


class TestStats:
    def test_accuracy_rounds_to_whole_percent(self, engine, ledger):
        user = make_user(engine, total_tournaments=3, won_tournaments=2)
        stats = ledger.get_stats(user.id)
        assert stats.accuracy == 67
        assert stats.total_tournaments == 3
        assert stats.won_tournaments == 2

    def test_new_user_can_claim_now(self, engine, ledger):
        user = make_user(engine)
        stats = ledger.get_stats(user.id)
        assert stats.accuracy == 0
        assert stats.last_claim_date is None
        assert stats.next_claim_available == START

    def test_next_claim_follows_last_claim(self, engine, ledger, clock):
        user = make_user(engine)
        ledger.claim_free(user.id)
        clock.advance(hours=1)
        assert ledger.get_stats(user.id).next_claim_available == START + timedelta(hours=24)

    def test_balance(self, engine, ledger):
        user = make_user(engine, points=321)
        assert ledger.balance(user.id) == 321

    def test_unknown_user(self, engine, ledger):
        with pytest.raises(NotFound):
            ledger.get_stats(999)
