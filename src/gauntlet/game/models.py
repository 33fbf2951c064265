"""Core game types: contestants, rounds, game state, round outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime

from gauntlet.constants import STAT_MAX, STAT_MIN, STATUS_ALIVE, STATUS_ELIMINATED
from gauntlet.errors import GameNotComplete, InvariantViolation


def id_sort_key(contestant_id: str) -> tuple[int, int, str]:
    """Natural ordering for contestant ids: numeric ids by value, then text."""
    if contestant_id.isdigit():
        return (0, int(contestant_id), contestant_id)
    return (1, 0, contestant_id)


@dataclass(frozen=True)
class Stats:
    """Stat vector, each value in [STAT_MIN, STAT_MAX]."""

    strength: int
    agility: int
    intelligence: int
    deception: int
    luck: int

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not STAT_MIN <= value <= STAT_MAX:
                raise ValueError(
                    f"{f.name}={value} outside [{STAT_MIN}, {STAT_MAX}]"
                )

    def as_dict(self) -> dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class Contestant:
    """A participant. Everything but ``status`` is fixed for the game."""

    id: str
    name: str
    personality: str
    trait: str
    stats: Stats
    description: str = ""
    status: str = STATUS_ALIVE
    eliminated_in_round: int | None = None

    @property
    def is_alive(self) -> bool:
        return self.status == STATUS_ALIVE

    def eliminate(self, round_number: int) -> None:
        """Transition alive -> eliminated. Never reversed, never repeated."""
        if not self.is_alive:
            raise InvariantViolation(
                f"contestant {self.id} eliminated twice "
                f"(rounds {self.eliminated_in_round} and {round_number})"
            )
        self.status = STATUS_ELIMINATED
        self.eliminated_in_round = round_number

    def profile(self) -> dict:
        """Plain-data view handed to collaborators (narrative, API)."""
        return {
            "id": self.id,
            "name": self.name,
            "personality": self.personality,
            "trait": self.trait,
            "description": self.description,
            "stats": self.stats.as_dict(),
            "status": self.status,
            "eliminated_in_round": self.eliminated_in_round,
        }


@dataclass(frozen=True)
class Round:
    """One scheduled elimination step."""

    number: int
    name: str
    kind: str
    description: str
    elimination_count: int

    def __post_init__(self) -> None:
        if self.number < 1:
            raise ValueError(f"round number must be >= 1, got {self.number}")
        if self.elimination_count < 0:
            raise ValueError(
                f"elimination_count must be >= 0, got {self.elimination_count}"
            )


@dataclass(frozen=True)
class RoundOutcome:
    """A committed round result. Immutable once emitted."""

    round: Round
    survivors: tuple[Contestant, ...]
    eliminated: tuple[Contestant, ...]
    seed: int | None
    committed_at: datetime

    @property
    def round_number(self) -> int:
        return self.round.number

    @property
    def eliminated_ids(self) -> list[str]:
        return [c.id for c in self.eliminated]

    @property
    def survivor_ids(self) -> list[str]:
        return [c.id for c in self.survivors]


@dataclass
class GameState:
    """Mutable game state owned by a single orchestrator.

    The roster is fixed for the lifetime of the game: contestants are never
    added or removed, only their status changes.
    """

    contestants: list[Contestant]
    rounds: list[Round]
    current_round: int = 0
    outcomes: list[RoundOutcome] = field(default_factory=list)

    def __post_init__(self) -> None:
        ids = [c.id for c in self.contestants]
        if not ids:
            raise ValueError("a game needs at least one contestant")
        if len(set(ids)) != len(ids):
            raise ValueError("contestant ids must be unique")
        if not any(c.is_alive for c in self.contestants):
            raise ValueError("a game needs at least one alive contestant")
        if not self.rounds:
            raise ValueError("a game needs at least one round")
        if [r.number for r in self.rounds] != list(range(1, len(self.rounds) + 1)):
            raise ValueError("rounds must be numbered 1..n in order")
        self._total_rounds = len(self.rounds)

    @property
    def total_rounds(self) -> int:
        return self._total_rounds

    def get_contestant(self, contestant_id: str) -> Contestant | None:
        for contestant in self.contestants:
            if contestant.id == contestant_id:
                return contestant
        return None

    def alive(self) -> list[Contestant]:
        return [c for c in self.contestants if c.is_alive]

    @property
    def alive_count(self) -> int:
        return sum(1 for c in self.contestants if c.is_alive)

    def is_complete(self) -> bool:
        return self.alive_count == 1 or self.current_round >= self.total_rounds

    def round_at(self, number: int) -> Round:
        return self.rounds[number - 1]

    def winner(self) -> Contestant:
        """The sole survivor, or the lowest-id survivor after the final round."""
        if not self.is_complete():
            raise GameNotComplete(
                f"no winner yet: round {self.current_round} of {self.total_rounds}"
            )
        return min(self.alive(), key=lambda c: id_sort_key(c.id))
