"""Tests for the GameOrchestrator state machine."""

import pytest

from gauntlet.errors import GameAlreadyComplete, GameNotComplete, InvariantViolation
from gauntlet.game.models import GameState
from gauntlet.game.orchestrator import GameOrchestrator
from gauntlet.game.simulator import SimulationResult
from gauntlet.session import new_game


class TestAdvance:
    def test_commits_eliminations(self, game, scripted_simulator):
        orch = GameOrchestrator(game, simulator=scripted_simulator)
        orch.advance()
        orch.advance()
        outcome = orch.advance()

        assert outcome.round_number == 3
        assert outcome.eliminated_ids == ["3"]
        assert outcome.survivor_ids == ["1", "2"]
        assert game.current_round == 3
        assert game.get_contestant("3").status == "eliminated"
        assert game.get_contestant("3").eliminated_in_round == 3
        assert game.outcomes[-1] is outcome

    def test_outcome_is_a_snapshot(self, game, scripted_simulator):
        orch = GameOrchestrator(game, simulator=scripted_simulator)
        first = orch.advance()
        game.get_contestant("3").eliminate(2)
        assert all(c.is_alive for c in first.survivors)

    def test_default_roster_runs_to_one_survivor(self):
        game = new_game()
        orch = GameOrchestrator(game, seed=11)
        outcomes = orch.run_to_completion()

        assert [len(o.survivors) for o in outcomes] == [8, 5, 3, 2, 1]
        assert game.alive_count == 1
        assert orch.winner().id == game.alive()[0].id

    def test_alive_count_never_increases(self):
        game = new_game()
        orch = GameOrchestrator(game, seed=3)
        counts = [game.alive_count]
        while not orch.is_complete():
            orch.advance()
            counts.append(game.alive_count)
        assert counts == sorted(counts, reverse=True)

    def test_same_seed_replays_identically(self):
        a = GameOrchestrator(new_game(), seed=99).run_to_completion()
        b = GameOrchestrator(new_game(), seed=99).run_to_completion()
        assert [o.eliminated_ids for o in a] == [o.eliminated_ids for o in b]
        assert [o.seed for o in a] == [o.seed for o in b]

    def test_advance_after_completion_raises(self, game, scripted_simulator):
        orch = GameOrchestrator(game, simulator=scripted_simulator)
        orch.run_to_completion()
        before = [c.status for c in game.contestants]

        with pytest.raises(GameAlreadyComplete):
            orch.advance()
        assert game.current_round == game.total_rounds
        assert [c.status for c in game.contestants] == before

    def test_rejects_simulator_that_kills_everyone(self, game):
        def wipeout(alive, count, seed):
            return SimulationResult(survivors=(), eliminated=tuple(alive))

        orch = GameOrchestrator(game, simulator=wipeout)
        with pytest.raises(InvariantViolation):
            orch.advance()
        assert game.current_round == 0
        assert game.alive_count == 3


class TestCompletion:
    def test_complete_when_one_alive(self, make_contestant, make_rounds):
        game = GameState(
            contestants=[make_contestant("1"), make_contestant("2")],
            rounds=make_rounds(1, 1, 1),
        )
        orch = GameOrchestrator(game, seed=0)
        orch.advance()
        assert orch.is_complete()
        assert game.current_round == 1

    def test_complete_after_final_round(self, game, scripted_simulator):
        orch = GameOrchestrator(game, simulator=scripted_simulator)
        outcomes = orch.run_to_completion()
        assert len(outcomes) == 5
        assert game.alive_count == 2
        assert orch.is_complete()

    def test_winner_before_completion_raises(self, game):
        with pytest.raises(GameNotComplete):
            GameOrchestrator(game).winner()

    def test_winner_tie_break_uses_natural_order(self, make_contestant, make_rounds):
        game = GameState(
            contestants=[make_contestant("10"), make_contestant("2")],
            rounds=make_rounds(0),
        )
        orch = GameOrchestrator(game)
        orch.advance()
        assert orch.winner().id == "2"

    def test_game_state_winner_without_orchestrator(self, make_contestant, make_rounds):
        game = GameState(
            contestants=[make_contestant("10"), make_contestant("9")],
            rounds=make_rounds(0),
        )
        with pytest.raises(GameNotComplete):
            game.winner()
        game.current_round = 1
        assert game.winner().id == "9"


class TestListeners:
    def test_listener_sees_committed_outcome(self, game, scripted_simulator):
        seen = []
        orch = GameOrchestrator(game, simulator=scripted_simulator)
        orch.add_listener(lambda outcome: seen.append((outcome.round_number, game.current_round)))
        orch.advance()
        assert seen == [(1, 1)]

    def test_failing_listener_is_isolated(self, game, scripted_simulator):
        seen = []

        def broken(outcome):
            raise RuntimeError("boom")

        orch = GameOrchestrator(game, simulator=scripted_simulator)
        orch.add_listener(broken)
        orch.add_listener(seen.append)
        outcome = orch.advance()

        assert seen == [outcome]
        assert game.current_round == 1


class TestGameState:
    def test_rejects_duplicate_ids(self, make_contestant, make_rounds):
        with pytest.raises(ValueError):
            GameState(contestants=[make_contestant("1"), make_contestant("1")], rounds=make_rounds(1))

    def test_rejects_empty_roster(self, make_rounds):
        with pytest.raises(ValueError):
            GameState(contestants=[], rounds=make_rounds(1))

    def test_rejects_misnumbered_rounds(self, make_contestant, make_rounds):
        rounds = make_rounds(1, 1)
        with pytest.raises(ValueError):
            GameState(contestants=[make_contestant("1")], rounds=list(reversed(rounds)))

    def test_double_elimination_is_a_defect(self, make_contestant):
        c = make_contestant("1")
        c.eliminate(1)
        with pytest.raises(InvariantViolation):
            c.eliminate(2)
