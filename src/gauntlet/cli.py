"""Gauntlet CLI, powered by Typer.

Usage::

    uv run gauntlet roster
    uv run gauntlet simulate [--seed 7] [--bet hana:200 --bet kyung:150] [--narrate]
    uv run gauntlet api serve [--port 8000]
"""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from gauntlet.betting.odds import compute_all_odds
from gauntlet.config import settings
from gauntlet.errors import GauntletError
from gauntlet.game.roster import default_contestants
from gauntlet.utils.stats import implied_probability, recommended_bet_amount

app = typer.Typer(name="gauntlet", help="Gauntlet elimination contest with wagering")
console = Console()


def _parse_bet(raw: str) -> tuple[str, float]:
    contestant_id, sep, amount = raw.partition(":")
    if not sep:
        raise typer.BadParameter(f"expected CONTESTANT:AMOUNT, got {raw!r}")
    try:
        return contestant_id, float(amount)
    except ValueError:
        raise typer.BadParameter(f"amount must be a number, got {amount!r}") from None


@app.command("roster")
def roster() -> None:
    """Show the default roster with opening odds."""
    contestants = default_contestants()
    odds = compute_all_odds(contestants)

    table = Table(title="Roster")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Personality")
    table.add_column("Trait")
    table.add_column("STR/AGI/INT/DEC/LCK", justify="center")
    table.add_column("Odds", justify="right")
    table.add_column("Implied", justify="right")
    table.add_column("Suggested", justify="right")

    for c in contestants:
        s = c.stats
        table.add_row(
            c.id,
            c.name,
            c.personality,
            c.trait,
            f"{s.strength}/{s.agility}/{s.intelligence}/{s.deception}/{s.luck}",
            f"{odds[c.id]:.2f}",
            f"{implied_probability(odds[c.id]):.1%}",
            str(recommended_bet_amount(
                settings.initial_balance, odds[c.id], settings.recommended_bet_cap
            )),
        )
    console.print(table)


@app.command("simulate")
def simulate(
    seed: int = typer.Option(None, help="Seed for elimination sampling"),
    bet: list[str] = typer.Option([], help="Bet as CONTESTANT:AMOUNT (repeatable)"),
    balance: float = typer.Option(None, help="Starting balance (default: config)"),
    narrate: bool = typer.Option(False, help="Print round narratives"),
) -> None:
    """Play a full game, settle the bets, and print the results."""
    from gauntlet.narrative.client import NarrativeClient
    from gauntlet.narrative.dispatcher import NarrativeDispatcher
    from gauntlet.session import GameSession, initialize_betting_state, new_game

    if narrate and not settings.narrative_enabled:
        console.print("[yellow]No API key set; using templated narratives.[/yellow]")

    game = new_game()
    dispatcher = (
        NarrativeDispatcher(NarrativeClient(total_rounds=game.total_rounds)) if narrate else None
    )
    session = GameSession(
        ledger=initialize_betting_state(balance),
        game=game,
        seed=seed,
        narrative=dispatcher,
    )

    for raw in bet:
        contestant_id, amount = _parse_bet(raw)
        try:
            placed = session.place_bet(contestant_id, amount)
        except GauntletError as exc:
            console.print(f"[red]Bet rejected ({type(exc).__name__}):[/red] {exc}")
            raise typer.Exit(1)
        console.print(
            f"Bet on [cyan]{contestant_id}[/cyan]: {placed.amount:.2f} @ {placed.odds:.2f} "
            f"-> potential {placed.potential_payout:.2f}"
        )

    while not session.is_complete():
        outcome = session.advance_round()
        names = ", ".join(c.name for c in outcome.eliminated) or "nobody"
        console.print(
            f"\n[bold]Round {outcome.round_number}: {outcome.round.name}[/bold] "
            f"eliminated {names}, {len(outcome.survivors)} remain"
        )
        if dispatcher is not None:
            for narrative in asyncio.run(dispatcher.drain()):
                for line in narrative.lines:
                    console.print(f"  [dim]{line}[/dim]")

    winner = session.winner()
    report = session.settle()
    console.print(f"\n[bold green]Winner:[/bold green] {winner.name} ({winner.id})")

    table = Table(title="Ledger")
    table.add_column("Bet", style="cyan")
    table.add_column("Contestant")
    table.add_column("Amount", justify="right")
    table.add_column("Odds", justify="right")
    table.add_column("Status")
    table.add_column("Payout", justify="right")
    for b in session.ledger.betting_history:
        table.add_row(
            b.id, b.contestant_id, f"{b.amount:.2f}", f"{b.odds:.2f}",
            b.status, f"{b.settled_payout:.2f}",
        )
    console.print(table)
    console.print(
        f"Balance: {report.balance_after:.2f}  "
        f"Net profit: {report.net_profit:+.2f}"
    )


# ── API commands ──────────────────────────────────────────────────────

api_app = typer.Typer(help="API server commands")
app.add_typer(api_app, name="api")


@api_app.command("serve")
def api_serve(
    host: str = typer.Option("127.0.0.1", help="Bind host"),
    port: int = typer.Option(8000, help="Port"),
    reload: bool = typer.Option(False, help="Auto-reload on file changes"),
) -> None:
    """Start the FastAPI game server."""
    import uvicorn

    console.print("\n[bold green]Starting Gauntlet API server[/bold green]")
    console.print(f"  Host: {host}:{port}")
    console.print(f"  Docs: http://{host}:{port}/docs\n")

    uvicorn.run(
        "gauntlet.api.app:app",
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    app()
