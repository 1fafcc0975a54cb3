"""Global vocabularies and field metadata."""

from tradeflow.models.settings import JournalField


# Seed vocabulary for every field, copied into a user's settings on first access
INITIAL_OPTIONS: dict[JournalField, list[str]] = {
    JournalField.PAIR: ["EUR/USD", "GBP/USD", "USD/JPY", "BTC/USD", "ETH/USD"],
    JournalField.TYPE: ["Long", "Short"],
    JournalField.PREMARKET_CONDITION: ["Fair Value Area", "Sweep", "Run", "Fair Value Gap"],
    JournalField.POI: [
        "Order Block", "Fair Value Gap", "Liquidity Pool",
        "Support Level", "Resistance Level", "Trendline",
    ],
    JournalField.REACTION_TO_POI: [
        "Strong Rejection", "Consolidation", "Breakthrough",
        "Slow Reaction", "No Reaction",
    ],
    JournalField.ENTRY_TYPE: ["Market", "Limit", "Stop", "Scaled Entry"],
    JournalField.SESSION: ["London", "New York", "Asian", "Overlap"],
    JournalField.PSYCHOLOGY: [
        "Confident", "Fearful", "Disciplined", "Impatient", "Greedy",
        "FOMO", "Neutral", "Anxious", "Overconfident",
    ],
    JournalField.OUTCOME: ["Win", "Loss", "Breakeven"],
    JournalField.RR_RATIO: [],
    JournalField.TRADINGVIEW_CHART_URL: [],
    JournalField.TP: ["Structure", "Liquidity", "Imbalance Fill", "Fibonacci Level"],
    JournalField.SL: ["Structure", "Volatility Based", "Fixed Pips", "Previous Candle High/Low"],
}

FIELD_LABELS: dict[JournalField, str] = {
    JournalField.DATE: "Date",
    JournalField.PAIR: "Trading Pair",
    JournalField.TYPE: "Trade Type",
    JournalField.PREMARKET_CONDITION: "Premarket Condition",
    JournalField.POI: "Point of Interest (POI)",
    JournalField.REACTION_TO_POI: "Reaction to POI",
    JournalField.ENTRY_TYPE: "Entry Type",
    JournalField.SESSION: "Trading Session",
    JournalField.PSYCHOLOGY: "Psychology/Emotions",
    JournalField.OUTCOME: "Outcome",
    JournalField.RR_RATIO: "RR Ratio",
    JournalField.TRADINGVIEW_CHART_URL: "TradingView Chart URL",
    JournalField.TP: "Take Profit (TP)",
    JournalField.SL: "Stop Loss (SL)",
}

# Form field order
JOURNAL_ENTRY_FIELDS: list[JournalField] = [
    JournalField.DATE,
    JournalField.PAIR,
    JournalField.TYPE,
    JournalField.PREMARKET_CONDITION,
    JournalField.POI,
    JournalField.REACTION_TO_POI,
    JournalField.TP,
    JournalField.SL,
    JournalField.ENTRY_TYPE,
    JournalField.SESSION,
    JournalField.PSYCHOLOGY,
    JournalField.OUTCOME,
    JournalField.RR_RATIO,
    JournalField.TRADINGVIEW_CHART_URL,
]

# Maps form fields to JournalEntryInput attribute names
FIELD_ATTRIBUTES: dict[JournalField, str] = {
    JournalField.DATE: "date",
    JournalField.PAIR: "pair",
    JournalField.TYPE: "direction",
    JournalField.PREMARKET_CONDITION: "premarket_condition",
    JournalField.POI: "poi",
    JournalField.REACTION_TO_POI: "reaction_to_poi",
    JournalField.ENTRY_TYPE: "entry_type",
    JournalField.SESSION: "session",
    JournalField.PSYCHOLOGY: "psychology",
    JournalField.OUTCOME: "outcome",
    JournalField.RR_RATIO: "rr_ratio",
    JournalField.TRADINGVIEW_CHART_URL: "tradingview_chart_url",
    JournalField.TP: "tp",
    JournalField.SL: "sl",
}

UNKNOWN_SESSION = "Unknown"

# Number of example trades shown per strategy in summaries
DISPLAY_EXAMPLE_LIMIT = 3
