"""Persistence layer for TradeFlow."""
