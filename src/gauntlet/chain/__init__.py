"""On-chain collaborator: mirrors finalized bets to a recording relay."""

from gauntlet.chain.recorder import ChainRecorder

__all__ = ["ChainRecorder"]
