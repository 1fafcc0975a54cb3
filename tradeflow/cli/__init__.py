"""CLI commands for TradeFlow."""
