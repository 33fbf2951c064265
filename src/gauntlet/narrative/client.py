"""Round narrative generation.

``NarrativeClient`` asks an OpenAI-compatible chat-completions endpoint to
dramatize a committed round. Without an API key, or when the service fails,
it falls back to ``FallbackNarrator``'s templated text. Either way the
result is read-only prose: nothing here feeds back into game or bet state.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import httpx

from gauntlet.config import settings
from gauntlet.game.models import RoundOutcome
from gauntlet.utils.logging import get_logger

log = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are a dramatic narrator for a deadly elimination contest. Create intense, "
    "suspenseful narratives. Write in present tense, be descriptive, and build "
    "tension. Keep each narrative segment to 1-2 sentences."
)

SECTION_HEADERS = {
    "SETUP:": "setup",
    "ACTION:": "action",
    "ELIMINATION:": "elimination",
    "DRAMATIC_MOMENTS:": "dramatic",
}


@dataclass
class RoundNarrative:
    """Narrative text for one round, split into sections."""

    round_number: int
    setup: list[str] = field(default_factory=list)
    action: list[str] = field(default_factory=list)
    elimination: list[str] = field(default_factory=list)
    dramatic: list[str] = field(default_factory=list)
    source: str = "fallback"  # "ai" or "fallback"

    @property
    def lines(self) -> list[str]:
        return [*self.setup, *self.action, *self.elimination, *self.dramatic]

    def is_empty(self) -> bool:
        return not self.lines


def build_prompt(round_name: str, round_description: str, round_number: int,
                 total_rounds: int, profiles: list[dict], outcome: RoundOutcome) -> str:
    """Render the user prompt for a round."""
    survivor_ids = set(outcome.survivor_ids)
    eliminated_ids = set(outcome.eliminated_ids)

    def status(cid: str) -> str:
        if cid in survivor_ids:
            return "SURVIVOR"
        if cid in eliminated_ids:
            return "ELIMINATED"
        return "UNKNOWN"

    profile_text = "\n\n".join(
        f"{p['name']}:\n"
        f"  - Personality: {p['personality']}\n"
        f"  - Trait: {p['trait']}\n"
        f"  - Description: {p.get('description', '')}\n"
        f"  - Stats: Strength {p['stats']['strength']}, Agility {p['stats']['agility']}, "
        f"Intelligence {p['stats']['intelligence']}, Deception {p['stats']['deception']}, "
        f"Luck {p['stats']['luck']}\n"
        f"  - Status: {status(p['id'])}"
        for p in profiles
    )
    survivors = ", ".join(f"{c.name} ({c.personality}, {c.trait})" for c in outcome.survivors)
    eliminated = ", ".join(f"{c.name} ({c.personality}, {c.trait})" for c in outcome.eliminated)

    return (
        f'Generate a dramatic narrative for Round {round_number} of {total_rounds}: "{round_name}".\n\n'
        f"ROUND DESCRIPTION: {round_description}\n\n"
        f"CONTESTANT PROFILES:\n{profile_text}\n\n"
        f"ROUND OUTCOME:\n"
        f"- Survivors: {survivors or 'None'}\n"
        f"- Eliminated: {eliminated or 'None'}\n"
        f"- Total eliminated this round: {len(outcome.eliminated)}\n\n"
        "Reference each contestant's personality, trait and stats. "
        "Format your response as:\n"
        "SETUP:\n[2-3 sentences]\n\nACTION:\n[3-4 sentences]\n\n"
        "ELIMINATION:\n[2-3 sentences]\n\nDRAMATIC_MOMENTS:\n[1-2 sentences]\n"
    )


def parse_narrative(text: str, round_number: int) -> RoundNarrative:
    """Split a sectioned model reply into a RoundNarrative."""
    narrative = RoundNarrative(round_number=round_number, source="ai")
    section: str | None = None
    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        header = next((h for h in SECTION_HEADERS if line.startswith(h)), None)
        if header:
            section = SECTION_HEADERS[header]
            remainder = line[len(header):].strip()
            if remainder:
                getattr(narrative, section).append(remainder)
            continue
        if section:
            getattr(narrative, section).append(line)
    return narrative


class FallbackNarrator:
    """Templated narrative used when the AI service is unavailable."""

    ELIMINATION_TEMPLATES = [
        "{name}'s {personality} nature betrays them at the crucial moment; "
        "agility {agility} is not enough.",
        "Despite being a {trait} with strength {strength}, {name} cannot overcome the game.",
        "{name}'s journey ends here, their intelligence of {intelligence} proving insufficient.",
        "{name}'s luck of {luck} finally runs out.",
    ]

    def narrate(self, outcome: RoundOutcome, total_alive_before: int) -> RoundNarrative:
        round_ = outcome.round
        elimination = []
        for contestant in outcome.eliminated:
            # Deterministic choice so replays read the same.
            idx = (sum(map(ord, contestant.id)) + round_.number) % len(self.ELIMINATION_TEMPLATES)
            elimination.append(
                self.ELIMINATION_TEMPLATES[idx].format(
                    name=contestant.name,
                    personality=contestant.personality.lower(),
                    trait=contestant.trait.lower(),
                    **contestant.stats.as_dict(),
                )
            )
        return RoundNarrative(
            round_number=round_.number,
            setup=[
                f"Round {round_.number}: {round_.name}",
                round_.description,
                f"{total_alive_before} contestants step forward, hearts pounding.",
            ],
            action=[
                "The game begins with deadly precision.",
                "Every decision could be the last.",
            ],
            elimination=elimination,
            dramatic=[f"{len(outcome.survivors)} contestants survive to the next round."],
            source="fallback",
        )


class NarrativeClient:
    """Client for an OpenAI-compatible chat-completions API."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
        total_rounds: int | None = None,
    ):
        self.api_key = settings.openai_api_key if api_key is None else api_key
        self.base_url = (base_url or settings.openai_base_url).rstrip("/")
        self.model = model or settings.openai_model
        self.total_rounds = total_rounds
        self.fallback = FallbackNarrator()
        self.client = httpx.Client(
            timeout=timeout or settings.narrative_timeout, transport=transport
        )

    def generate_narrative(
        self,
        round_,
        contestant_profiles: list[dict],
        outcome: RoundOutcome,
    ) -> RoundNarrative:
        """Narrate a committed round. Never raises for service failures."""
        alive_before = len(outcome.survivors) + len(outcome.eliminated)
        if not self.api_key:
            log.info("narrative_fallback", round=round_.number, reason="api_key_not_set")
            return self.fallback.narrate(outcome, alive_before)

        prompt = build_prompt(
            round_.name,
            round_.description,
            round_.number,
            self.total_rounds or round_.number,
            contestant_profiles,
            outcome,
        )
        try:
            response = self.client.post(
                f"{self.base_url}/chat/completions",
                headers={"Authorization": f"Bearer {self.api_key}"},
                json={
                    "model": self.model,
                    "messages": [
                        {"role": "system", "content": SYSTEM_PROMPT},
                        {"role": "user", "content": prompt},
                    ],
                    "max_tokens": 800,
                    "temperature": 0.8,
                },
            )
            response.raise_for_status()
            content = response.json()["choices"][0]["message"]["content"]
        except (httpx.HTTPError, KeyError, IndexError, ValueError) as exc:
            log.warning("narrative_request_failed", round=round_.number, error=str(exc))
            return self.fallback.narrate(outcome, alive_before)

        narrative = parse_narrative(content or "", round_.number)
        if narrative.is_empty():
            log.warning("narrative_empty_response", round=round_.number)
            return self.fallback.narrate(outcome, alive_before)

        log.info("narrative_generated", round=round_.number, lines=len(narrative.lines))
        return narrative

    def close(self) -> None:
        self.client.close()
