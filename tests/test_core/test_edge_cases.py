"""
Edge cases: folds, tiny stacks, terminal sessions and rule helpers.
"""

import pytest
from duelpoker.core.errors import GameError, NotActiveGame, OutOfTurn, UnknownPlayer
from duelpoker.core.game import (
    apply_action, chip_total, create_session, get_legal_actions, get_state, set_connected,
)
from duelpoker.core.rules import (
    ActionType, GameRound, GameStatus,
    get_blind_seats, get_first_to_act, min_raise_total, parse_action, split_pot,
)

from helpers import play


class TestFold:

    def test_fold_preflop(self, session):
        session = apply_action(session, "bob", "fold")
        assert session.status == GameStatus.COMPLETED
        assert session.winner_id == "alice"
        assert session.players[0].chips == 1010
        assert session.players[1].chips == 990
        assert session.payouts == {"alice": 15}
        assert session.winning_hand is None

    def test_fold_after_flop(self, session):
        session = play(session, [
            ("bob", "check"), ("alice", "call"),
            ("alice", "raise", 50), ("bob", "fold"),
        ])
        assert session.winner_id == "alice"
        assert session.players[0].chips == 1010
        assert session.players[1].chips == 990
        # The board stays where it was
        assert len(session.revealed_community_cards) == 3

    def test_fold_when_check_is_free(self, session):
        session = apply_action(session, "bob", "fold")
        assert session.winner_id == "alice"


class TestTinyStacks:

    def test_both_blinds_all_in(self, rng):
        session = create_session("tiny", ("alice", 3), ("bob", 4), rng=rng)
        # Nobody can act, so the hand runs out at creation
        assert session.status == GameStatus.COMPLETED
        assert session.round == GameRound.SHOWDOWN
        assert chip_total(session) == 7
        assert len(session.revealed_community_cards) == 5

    def test_small_blind_all_in(self, rng):
        session = create_session("tiny", ("alice", 5), ("bob", 1000), rng=rng)
        # Bob already covers alice's whole stack
        assert session.status == GameStatus.COMPLETED
        assert sum(session.payouts.values()) == 10
        assert chip_total(session) == 1005

    def test_big_blind_short(self, rng):
        session = create_session("tiny", ("alice", 1000), ("bob", 7), rng=rng)
        session = apply_action(session, "alice", "call")
        assert session.status == GameStatus.COMPLETED
        assert sum(session.payouts.values()) == 14
        assert chip_total(session) == 1007

    def test_big_blind_short_fold(self, rng):
        session = create_session("tiny", ("alice", 1000), ("bob", 7), rng=rng)
        session = apply_action(session, "alice", "fold")
        assert session.winner_id == "bob"
        assert session.players[1].chips == 12


class TestTerminal:

    @pytest.mark.parametrize("action", [a.value for a in ActionType])
    def test_no_actions_after_completion(self, session, action):
        done = apply_action(session, "bob", "fold")
        for player_id in ("alice", "bob"):
            with pytest.raises(NotActiveGame):
                apply_action(done, player_id, action, 100)

    def test_completed_state_still_readable(self, session):
        done = apply_action(session, "bob", "fold")
        assert get_state(done).winner_id == "alice"
        assert get_legal_actions(done) == []
        assert done.current_player is None

    def test_set_connected_unknown_player(self, session):
        with pytest.raises(UnknownPlayer):
            set_connected(session, "carol", False)


class TestErrors:

    def test_error_payload(self):
        assert OutOfTurn().to_dict() == {"error": "OUT_OF_TURN", "detail": "Not your turn."}

    def test_error_detail(self):
        err = NotActiveGame("Session s1 is completed")
        assert str(err) == "Session s1 is completed"
        assert isinstance(err, GameError)


class TestRuleHelpers:

    def test_min_raise_total(self):
        assert min_raise_total(0) == 1
        assert min_raise_total(10) == 20
        assert min_raise_total(55) == 110

    def test_blind_seats(self):
        assert get_blind_seats(0) == (0, 1)
        assert get_blind_seats(1) == (1, 0)

    def test_first_to_act(self):
        assert get_first_to_act(GameRound.PRE_FLOP, 0) == 1
        assert get_first_to_act(GameRound.FLOP, 0) == 0
        assert get_first_to_act(GameRound.RIVER, 1) == 1

    def test_parse_action(self):
        assert parse_action("Raise") == ActionType.RAISE
        assert parse_action(ActionType.FOLD) == ActionType.FOLD
        with pytest.raises(ValueError):
            parse_action("bet")

    def test_split_pot_single_winner(self):
        assert split_pot(21, [1], 0) == {1: 21}

    def test_split_pot_odd_chip_to_non_dealer(self):
        assert split_pot(21, [0, 1], 0) == {0: 10, 1: 11}
        assert split_pot(21, [0, 1], 1) == {0: 11, 1: 10}

    def test_split_pot_even(self):
        assert split_pot(40, [0, 1], 0) == {0: 20, 1: 20}

    def test_split_pot_no_winners(self):
        assert split_pot(40, [], 0) == {}
