"""HTTP API over game sessions."""
