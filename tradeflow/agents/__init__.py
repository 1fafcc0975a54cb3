"""AI agents for TradeFlow.

- PatternAnalyzerAgent: suggests strategies from recurring journal patterns
"""

from tradeflow.agents.base import (
    create_agent,
    get_api_key,
    get_model,
    run_agent_async,
    run_agent_sync,
)
from tradeflow.agents.pattern_analyzer import PatternAnalyzerAgent, build_prompt, to_ai_entry

__all__ = [
    # Base utilities
    "create_agent",
    "run_agent_sync",
    "run_agent_async",
    "get_model",
    "get_api_key",
    # Agents
    "PatternAnalyzerAgent",
    "build_prompt",
    "to_ai_entry",
]
