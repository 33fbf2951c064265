"""Application configuration via Pydantic Settings."""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration loaded from environment variables and .env file."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "GAUNTLET_"}

    # Paths
    project_root: Path = Path(__file__).resolve().parent.parent.parent

    # Ledger
    initial_balance: float = 1000.0
    min_bet: float = 1.0
    max_bet_fraction: float = 0.5
    recommended_bet_cap: float = 0.1

    # Odds model
    house_margin: float = 0.9
    odds_min: float = 1.1
    odds_max: float = 50.0

    # Narrative service (OpenAI-compatible chat completions)
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-3.5-turbo"
    narrative_timeout: float = 30.0

    # On-chain relay
    chain_relay_url: str = ""
    chain_timeout: float = 30.0

    # API
    max_sessions: int = 1000

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    @property
    def narrative_enabled(self) -> bool:
        return bool(self.openai_api_key)

    @property
    def chain_enabled(self) -> bool:
        return bool(self.chain_relay_url)


settings = Settings()
