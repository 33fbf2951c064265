"""Tests for fitness scoring and the odds model."""

import pytest

from gauntlet.betting.odds import OddsModel, compute_all_odds, compute_odds, fitness
from gauntlet.errors import InvalidContestant
from gauntlet.game.roster import default_contestants


class TestFitness:
    def test_uniform_stats(self, make_contestant):
        # 5 * (1.2 + 1.2 + 1.3 + 1.1 + 0.8)
        assert fitness(make_contestant("1")) == pytest.approx(28.0)

    def test_weighting(self, make_contestant):
        c = make_contestant("1", strength=4, agility=5, intelligence=10, deception=7, luck=6)
        assert fitness(c) == pytest.approx(36.0)

    def test_deception_only_helps(self, make_contestant):
        honest = make_contestant("1", deception=1)
        liar = make_contestant("2", deception=10)
        assert fitness(liar) > fitness(honest)


class TestOddsModel:
    def test_equal_field(self, make_contestant):
        field = [make_contestant(str(i)) for i in range(1, 4)]
        assert compute_odds(field[0], field) == pytest.approx(2.7)

    def test_sole_survivor_clamped_to_min(self, make_contestant):
        c = make_contestant("1")
        assert compute_odds(c, [c]) == pytest.approx(1.1)

    def test_long_shot_clamped_to_max(self, make_contestant):
        weak = make_contestant("1", 1, 1, 1, 1, 1)
        field = [weak] + [make_contestant(str(i), 10, 10, 10, 10, 10) for i in range(2, 11)]
        assert compute_odds(weak, field) == pytest.approx(50.0)

    def test_rounded_to_cents(self, make_contestant):
        field = [make_contestant("1", luck=6), make_contestant("2"), make_contestant("3")]
        odds = compute_odds(field[1], field)
        assert odds == round(odds, 2)

    def test_dead_contestant_raises(self, make_contestant):
        a, b = make_contestant("1"), make_contestant("2")
        with pytest.raises(InvalidContestant):
            compute_odds(a, [b])

    def test_custom_margin(self, make_contestant):
        model = OddsModel(house_margin=1.0, odds_min=1.0, odds_max=100.0)
        field = [make_contestant("1"), make_contestant("2")]
        assert model.compute_odds(field[0], field) == pytest.approx(2.0)

    @pytest.mark.parametrize(
        "kwargs",
        [{"odds_min": 0.5}, {"odds_min": 3.0, "odds_max": 2.0}, {"house_margin": 0.0}],
    )
    def test_invalid_configuration(self, kwargs):
        with pytest.raises(ValueError):
            OddsModel(**kwargs)


class TestOddsBoard:
    def test_default_roster_board(self):
        contestants = default_contestants()
        board = compute_all_odds(contestants)

        assert set(board) == {c.id for c in contestants}
        # Sora has the lowest fitness, Kyung and Mira share the highest.
        assert max(board, key=board.get) == "sora"
        assert board["kyung"] == board["mira"] == min(board.values())

    def test_board_skips_eliminated(self, game):
        game.get_contestant("3").eliminate(1)
        board = compute_all_odds(game.contestants)
        assert set(board) == {"1", "2"}
        assert board["1"] == pytest.approx(1.8)

    def test_favourite_pays_least(self, make_contestant):
        field = [make_contestant("1", strength=10), make_contestant("2"), make_contestant("3", luck=1)]
        board = compute_all_odds(field)
        assert board["1"] < board["2"] < board["3"]
