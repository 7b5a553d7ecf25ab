"""Settlement: prize split, zero-winner forfeit and all-or-nothing resolution."""
import pytest
from sqlalchemy import event

from conftest import get_tournament, get_user, make_tournament, make_user
from prediction_arena.core.errors import NotActive, NotFound, ValidationError
from prediction_arena.db.models import TournamentStatus
from prediction_arena.services import settlement as settlement_module
from prediction_arena.services.settlement import split_prize


def enter_all(engine, coordinator, tournament, predictions):
    users = []
    for prediction in predictions:
        user = make_user(engine, points=1000)
        coordinator.enter(tournament.id, user.id, prediction)
        users.append(user)
    return users


def close(engine, registry, clock, tournament):
    clock.advance(hours=3)
    registry.sweep()
    assert get_tournament(engine, tournament.id).status == TournamentStatus.CLOSED.value


@pytest.mark.parametrize(
    "pool, winners, expected",
    [(100, 3, (33, 1)), (100, 1, (100, 0)), (100, 0, (0, 100)), (0, 2, (0, 0))],
)
def test_split_prize(pool, winners, expected):
    assert split_prize(pool, winners) == expected


class TestResolve:
    def test_three_winners_share_pool_rounding_down(
        self, engine, coordinator, registry, settlement, clock
    ):
        tournament = make_tournament(engine, entry_fee=20, options=("A", "B", "C"))
        winners = enter_all(engine, coordinator, tournament, ["A", "A", "A"])
        losers = enter_all(engine, coordinator, tournament, ["B", "C"])
        assert get_tournament(engine, tournament.id).prize_pool == 100
        close(engine, registry, clock, tournament)

        result = settlement.resolve(tournament.id, "A")

        assert result.winner_count == 3
        assert result.prize_per_winner == 33
        assert result.undistributed == 1
        for user in winners:
            stored = get_user(engine, user.id)
            assert stored.points == 1000 - 20 + 33
            assert stored.won_tournaments == 1
        for user in losers:
            stored = get_user(engine, user.id)
            assert stored.points == 980
            assert stored.won_tournaments == 0

        resolved = get_tournament(engine, tournament.id)
        assert resolved.status == TournamentStatus.RESOLVED.value
        assert resolved.correct_answer == "A"

    def test_total_paid_never_exceeds_pool(
        self, engine, coordinator, registry, settlement, clock
    ):
        tournament = make_tournament(engine, entry_fee=7, options=("Yes", "No"))
        users = enter_all(engine, coordinator, tournament, ["Yes"] * 4 + ["No"] * 3)
        close(engine, registry, clock, tournament)

        result = settlement.resolve(tournament.id, "Yes")

        paid = sum(get_user(engine, u.id).points for u in users) - 7 * (1000 - 7)
        assert paid == result.prize_per_winner * result.winner_count <= 49
        assert paid + result.undistributed == 49

    def test_winners_are_locked_in_id_order_before_credit(
        self, engine, coordinator, registry, settlement, clock
    ):
        tournament = make_tournament(engine, entry_fee=10)
        enter_all(engine, coordinator, tournament, ["Yes", "No", "Yes"])
        close(engine, registry, clock, tournament)
        statements = []

        def record(_conn, _cursor, statement, *_args):
            statements.append(" ".join(statement.split()))

        event.listen(engine, "before_cursor_execute", record)
        try:
            settlement.resolve(tournament.id, "Yes")
        finally:
            event.remove(engine, "before_cursor_execute", record)

        lock = next(i for i, s in enumerate(statements) if "ORDER BY users.id" in s)
        credit = next(i for i, s in enumerate(statements) if s.startswith("UPDATE users"))
        assert statements[lock].startswith("SELECT users.id")
        assert lock < credit

    def test_no_winners_forfeits_pool(self, engine, coordinator, registry, settlement, clock):
        tournament = make_tournament(engine, entry_fee=100)
        users = enter_all(engine, coordinator, tournament, ["No", "No"])
        close(engine, registry, clock, tournament)

        result = settlement.resolve(tournament.id, "Yes")

        assert result.winner_count == 0
        assert result.prize_per_winner == 0
        assert result.undistributed == 200
        assert [get_user(engine, u.id).points for u in users] == [900, 900]
        assert get_tournament(engine, tournament.id).status == TournamentStatus.RESOLVED.value

    def test_only_closed_tournaments_resolve(self, engine, settlement):
        tournament = make_tournament(engine, status=TournamentStatus.ACTIVE)
        with pytest.raises(NotActive):
            settlement.resolve(tournament.id, "Yes")
        assert get_tournament(engine, tournament.id).status == TournamentStatus.ACTIVE.value

    def test_resolving_twice_does_not_pay_twice(
        self, engine, coordinator, registry, settlement, clock
    ):
        tournament = make_tournament(engine, entry_fee=100)
        (winner,) = enter_all(engine, coordinator, tournament, ["Yes"])
        close(engine, registry, clock, tournament)
        settlement.resolve(tournament.id, "Yes")

        with pytest.raises(NotActive):
            settlement.resolve(tournament.id, "Yes")
        assert get_user(engine, winner.id).points == 1000

    def test_answer_must_be_an_option(self, engine, settlement):
        tournament = make_tournament(engine, status=TournamentStatus.CLOSED)
        with pytest.raises(ValidationError):
            settlement.resolve(tournament.id, "Maybe")
        assert get_tournament(engine, tournament.id).status == TournamentStatus.CLOSED.value

    def test_unknown_tournament(self, engine, settlement):
        with pytest.raises(NotFound):
            settlement.resolve(404, "Yes")

    def test_failure_part_way_rolls_back(
        self, engine, coordinator, registry, settlement, clock, monkeypatch
    ):
        tournament = make_tournament(engine, entry_fee=100)
        (winner,) = enter_all(engine, coordinator, tournament, ["Yes"])
        close(engine, registry, clock, tournament)

        def boom(*_args):
            raise RuntimeError("crash after status change")

        monkeypatch.setattr(settlement_module, "split_prize", boom)
        with pytest.raises(RuntimeError):
            settlement.resolve(tournament.id, "Yes")

        stored = get_tournament(engine, tournament.id)
        assert stored.status == TournamentStatus.CLOSED.value
        assert stored.correct_answer is None
        assert get_user(engine, winner.id).points == 900
