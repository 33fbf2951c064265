"""Narrative collaborator: AI/fallback narration of committed rounds."""

from gauntlet.narrative.client import FallbackNarrator, NarrativeClient, RoundNarrative
from gauntlet.narrative.dispatcher import NarrativeDispatcher

__all__ = ["FallbackNarrator", "NarrativeClient", "NarrativeDispatcher", "RoundNarrative"]
