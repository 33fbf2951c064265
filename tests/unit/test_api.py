"""Tests for FastAPI endpoints using TestClient."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from gauntlet.api.services import SessionRegistry


@pytest.fixture
def registry():
    return SessionRegistry()


@pytest.fixture
def client(registry):
    """TestClient backed by an empty session registry."""
    with patch("gauntlet.api.services._registry", registry):
        from gauntlet.api.app import create_app

        app = create_app()
        with TestClient(app) as c:
            yield c


@pytest.fixture
def game_id(client):
    response = client.post("/api/games", json={"seed": 7})
    assert response.status_code == 201
    return response.json()["session_id"]


def _play_out(client, game_id):
    while True:
        outcome = client.post(f"/api/games/{game_id}/rounds").json()
        if outcome["is_complete"]:
            return outcome


class TestHealthEndpoint:
    def test_health_returns_200(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["sessions"] == 0
        assert "timestamp" in data

    def test_health_counts_sessions(self, client, game_id):
        assert client.get("/health").json()["sessions"] == 1


class TestRosterEndpoint:
    def test_roster(self, client):
        response = client.get("/api/roster")
        assert response.status_code == 200
        roster = response.json()
        assert len(roster) == 10
        assert roster[0]["id"] == "jihoon"
        assert roster[0]["stats"]["intelligence"] == 8


class TestGamesEndpoint:
    def test_create_without_body(self, client):
        response = client.post("/api/games")
        assert response.status_code == 201
        data = response.json()
        assert data["current_round"] == 0
        assert data["total_rounds"] == 5
        assert data["alive_count"] == 10
        assert data["winner_id"] is None

    def test_get_game(self, client, game_id):
        data = client.get(f"/api/games/{game_id}").json()
        assert data["session_id"] == game_id
        assert data["settled"] is False

    def test_unknown_game(self, client):
        response = client.get("/api/games/nope")
        assert response.status_code == 404
        assert response.json()["error"] == "SessionNotFound"

    def test_odds(self, client, game_id):
        odds = client.get(f"/api/games/{game_id}/odds").json()
        assert len(odds) == 10
        assert all(1.1 <= v <= 50.0 for v in odds.values())

    def test_advance_round(self, client, game_id):
        response = client.post(f"/api/games/{game_id}/rounds")
        assert response.status_code == 200
        outcome = response.json()
        assert outcome["round_number"] == 1
        assert len(outcome["eliminated"]) == 2
        assert len(outcome["survivors"]) == 8

    def test_advance_after_completion(self, client, game_id):
        _play_out(client, game_id)
        response = client.post(f"/api/games/{game_id}/rounds")
        assert response.status_code == 409
        assert response.json()["error"] == "GameAlreadyComplete"

    def test_settle_before_completion(self, client, game_id):
        response = client.post(f"/api/games/{game_id}/settle")
        assert response.status_code == 409
        assert response.json()["error"] == "GameNotComplete"

    def test_full_game(self, client, game_id):
        bet = client.post(
            f"/api/games/{game_id}/bets", json={"contestant_id": "hana", "amount": 100}
        ).json()
        final = _play_out(client, game_id)
        winner = final["survivors"][0]

        settlement = client.post(f"/api/games/{game_id}/settle").json()
        assert settlement["winner_id"] == winner
        expected = 900.0 + (bet["potential_payout"] if winner == "hana" else 0.0)
        assert settlement["balance_after"] == pytest.approx(expected)

        again = client.post(f"/api/games/{game_id}/settle")
        assert again.status_code == 409

    def test_abort_refunds(self, client, game_id):
        client.post(f"/api/games/{game_id}/bets", json={"contestant_id": "hana", "amount": 300})
        response = client.delete(f"/api/games/{game_id}")
        assert response.status_code == 200
        ledger = response.json()
        assert ledger["user_balance"] == pytest.approx(1000.0)
        assert ledger["betting_history"][0]["status"] == "refunded"
        assert client.get(f"/api/games/{game_id}").status_code == 404


class TestBetsEndpoint:
    def test_place_bet_at_board_price(self, client, game_id):
        odds = client.get(f"/api/games/{game_id}/odds").json()
        response = client.post(
            f"/api/games/{game_id}/bets", json={"contestant_id": "kyung", "amount": 50}
        )
        assert response.status_code == 201
        bet = response.json()
        assert bet["odds"] == odds["kyung"]
        assert bet["status"] == "active"

        ledger = client.get(f"/api/games/{game_id}/ledger").json()
        assert ledger["user_balance"] == pytest.approx(950.0)
        assert bet["id"] in ledger["active_bets"]

    def test_invalid_stake(self, client, game_id):
        response = client.post(
            f"/api/games/{game_id}/bets", json={"contestant_id": "kyung", "amount": 0}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidStake"

    def test_unknown_contestant(self, client, game_id):
        response = client.post(
            f"/api/games/{game_id}/bets", json={"contestant_id": "nobody", "amount": 10}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidContestant"

    def test_insufficient_funds(self, client, game_id):
        response = client.post(
            f"/api/games/{game_id}/bets", json={"contestant_id": "kyung", "amount": 5000}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "InsufficientFunds"

    def test_refund(self, client, game_id):
        bet = client.post(
            f"/api/games/{game_id}/bets", json={"contestant_id": "mira", "amount": 20}
        ).json()
        response = client.post(f"/api/games/{game_id}/bets/{bet['id']}/refund")
        assert response.status_code == 200
        assert response.json()["status"] == "refunded"

        again = client.post(f"/api/games/{game_id}/bets/{bet['id']}/refund")
        assert again.status_code == 404
        assert again.json()["error"] == "BetNotFound"

    def test_refund_rejected_once_rounds_start(self, client, game_id):
        bet = client.post(
            f"/api/games/{game_id}/bets", json={"contestant_id": "mira", "amount": 200}
        ).json()
        client.post(f"/api/games/{game_id}/rounds")

        response = client.post(f"/api/games/{game_id}/bets/{bet['id']}/refund")
        assert response.status_code == 409
        assert response.json()["error"] == "RefundNotAllowed"
        ledger = client.get(f"/api/games/{game_id}/ledger").json()
        assert ledger["user_balance"] == pytest.approx(800.0)
        assert bet["id"] in ledger["active_bets"]

    @pytest.mark.parametrize(
        "payload",
        [
            '{"contestant_id": "kyung", "amount": 10, "odds": Infinity}',
            '{"contestant_id": "kyung", "amount": Infinity}',
            '{"contestant_id": "kyung", "amount": NaN}',
        ],
    )
    def test_non_finite_numbers_rejected(self, client, game_id, payload):
        response = client.post(
            f"/api/games/{game_id}/bets",
            content=payload,
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 422
        ledger = client.get(f"/api/games/{game_id}/ledger").json()
        assert ledger["user_balance"] == pytest.approx(1000.0)

    def test_huge_odds_rejected(self, client, game_id):
        response = client.post(
            f"/api/games/{game_id}/bets",
            json={"contestant_id": "kyung", "amount": 100, "odds": 1e307},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidStake"


class TestNarrativesEndpoint:
    def test_disabled(self, client, game_id):
        client.post(f"/api/games/{game_id}/rounds")
        response = client.get(f"/api/games/{game_id}/narratives/1")
        assert response.status_code == 404

    def test_fallback_narrative(self, client):
        with patch("gauntlet.narrative.client.settings.openai_api_key", ""):
            game_id = client.post("/api/games", json={"seed": 1, "narrate": True}).json()[
                "session_id"
            ]
            client.post(f"/api/games/{game_id}/rounds")
            response = client.get(f"/api/games/{game_id}/narratives/1")

        assert response.status_code == 200
        data = response.json()
        assert data["round_number"] == 1
        assert data["source"] == "fallback"
        assert data["lines"]

    def test_round_not_played(self, client):
        game_id = client.post("/api/games", json={"narrate": True}).json()["session_id"]
        response = client.get(f"/api/games/{game_id}/narratives/4")
        assert response.status_code == 404
