"""TradeFlow - a personal trading journal with AI pattern analysis."""

__version__ = "0.1.0"
