"""
Tests for showdown resolution, including split pots.

Hands are fixed with rig_session so the outcome does not depend on the shuffle.
"""

from duelpoker.core.card import full_deck
from duelpoker.core.game import chip_total, create_session, session_to_dict
from duelpoker.core.rules import GameRound, GameStatus

from helpers import check_down, play, rig_session


BOARD = "Ad 7c 2s 9h 3d"


class TestShowdownWinner:

    def test_trips_beat_kings(self, session):
        session = rig_session(session, "As Ah", "Ks Kh", BOARD)
        session = check_down(session)

        assert session.status == GameStatus.COMPLETED
        assert session.round == GameRound.SHOWDOWN
        assert session.winner_id == "alice"
        assert session.winner_ids == ["alice"]
        assert session.winning_category == "Three of a Kind"
        assert session.winning_hand == "Three of a Kind, Aces"
        assert session.payouts == {"alice": 20}
        assert session.players[0].chips == 1010
        assert session.players[1].chips == 990
        assert session.pot == 0

    def test_non_dealer_wins(self, session):
        session = rig_session(session, "8c 4h", "Ks Kh", BOARD)
        session = check_down(session)
        assert session.winner_id == "bob"
        assert session.winning_category == "Pair"
        assert session.players[1].chips == 1010

    def test_bigger_pot(self, session):
        session = rig_session(session, "As Ah", "Ks Kh", BOARD)
        session = play(session, [("bob", "raise", 100), ("alice", "call")])
        session = check_down(session)
        assert session.players[0].chips == 1100
        assert session.players[1].chips == 900

    def test_hole_cards_shown_to_everyone(self, session):
        session = rig_session(session, "As Ah", "Ks Kh", BOARD)
        before = session_to_dict(session)
        assert all(c["hidden"] for p in before["players"] for c in p["hand"])

        view = session_to_dict(check_down(session))
        assert [c["text"] for c in view["players"][0]["hand"]] == ["A♠", "A♥"]
        assert view["players"][1]["hand"][0]["text"] == "K♠"

    def test_rigged_deck_is_complete(self, session):
        session = rig_session(session, "As Ah", "Ks Kh", BOARD)
        cards = session.players[0].hand + session.players[1].hand + session.community_cards + session.deck
        assert len(cards) == 52
        assert set(cards) == set(full_deck())


class TestSplitPot:

    def test_board_plays(self, session):
        session = rig_session(session, "2c 3c", "4h 5h", "Ad Kc Qh Js 10d")
        session = check_down(session)
        assert session.winner_id is None
        assert session.winner_ids == ["alice", "bob"]
        assert session.payouts == {"alice": 10, "bob": 10}
        assert session.players[0].chips == 1000
        assert session.players[1].chips == 1000
        assert session.winning_hand == "Straight, Ace high"

    def test_split_after_raises(self, session):
        session = rig_session(session, "2c 3c", "4h 5h", "Ad Kc Qh Js 10d")
        session = play(session, [("bob", "raise", 50), ("alice", "call")])
        session = check_down(session)
        assert session.payouts == {"alice": 50, "bob": 50}
        assert chip_total(session) == 2000


class TestAllInShowdown:

    def test_short_stack_wins_only_what_was_matched(self, rng):
        session = create_session("short", ("alice", 20), ("bob", 1000), rng=rng)
        session = rig_session(session, "As Ah", "Ks Kh", BOARD)
        session = play(session, [("bob", "raise", 55), ("alice", "call")])

        assert session.status == GameStatus.COMPLETED
        assert session.winner_id == "alice"
        assert session.payouts == {"alice": 40}
        assert session.players[0].chips == 40
        # The 35 alice could not call went back to bob
        assert session.players[1].chips == 980

    def test_short_stack_loses(self, rng):
        session = create_session("short", ("alice", 20), ("bob", 1000), rng=rng)
        session = rig_session(session, "Ks Kh", "As Ah", BOARD)
        session = play(session, [("bob", "raise", 55), ("alice", "call")])
        assert session.winner_id == "bob"
        assert session.players[0].chips == 0
        assert session.players[1].chips == 1020
