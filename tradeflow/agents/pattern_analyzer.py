"""Pattern Analyzer Agent for journal strategy suggestions.

The agent reads a trader's journal and returns suggested strategies for
recurring combinations of POI, reaction to POI, premarket condition and
entry type, as a structured PatternAnalysisOutput.
"""

import logging
from typing import Any, Iterable, Optional

from agents import Agent
from agents.exceptions import AgentsException
from openai import OpenAIError
from pydantic import ValidationError

from tradeflow.agents.base import configure_api_key, create_agent, run_agent_async, run_agent_sync
from tradeflow.analytics.patterns import rescore_strategies
from tradeflow.errors import AnalysisError
from tradeflow.models import AIJournalEntry, JournalEntry, PatternAnalysisOutput, SuggestedStrategy

logger = logging.getLogger(__name__)


PATTERN_ANALYZER_INSTRUCTIONS = """You are an expert trading strategy analyst. You analyze trading journal entries to identify recurring trading patterns.
Your goal is to suggest actionable trading strategies based on combinations of Point of Interest (POI), Reaction to POI, Premarket Conditions, and the Entry Type used.

Identify and include all discernible trading patterns. For each pattern:
1. Specify the 'poiCombination' and 'reactionToPoiCombination'.
2. Specify the 'entryType' that is most commonly or effectively associated with this pattern's success.
3. If Premarket Condition(s) are a strong recurring factor for the pattern's success, include the 'premarketConditionCombination'.
4. Formulate an actionable 'strategy'. The description must be detailed:
   - Clearly state the trade direction (Long/Short).
   - Describe the entry idea/conditions, aligning with the identified 'entryType' (e.g., "Consider a Limit entry upon a bullish rejection from the [POI] after price sweeps liquidity below it during [Premarket Condition]").
   - Suggest key Take Profit (TP) considerations based on observed successful TP reasons/levels for this pattern.
   - Suggest key Stop Loss (SL) considerations based on observed SL reasons/levels for this pattern.
5. Provide a 'confidence' score (0-1). It should primarily reflect the pattern's historical profitability (wins vs. losses and their RR Ratios) and consistency. Patterns with more 'Win' outcomes, especially with favorable RR Ratios, receive higher confidence.
6. List 'exampleTrades' that support the strategy, prioritizing winning examples.
7. Consider 'psychology': if certain psychological states (e.g., "Disciplined") consistently accompany winning trades for a pattern, or negative states (e.g., "FOMO") accompany losses, briefly mention this in the 'strategy' description.

Even if a pattern has low confidence (few occurrences, mixed results), include it if it is a recurring combination.
If absolutely no recurring patterns (profitable or otherwise) can be identified, then and only then return an empty array for suggestedStrategies.
"""


def to_ai_entry(entry: JournalEntry) -> AIJournalEntry:
    """Convert a stored entry to the shape shown to the model."""
    return AIJournalEntry(
        pair=entry.pair,
        date=entry.date.isoformat(),
        type=entry.direction.value,
        premarket_condition=list(entry.premarket_condition),
        poi=list(entry.poi),
        reaction_to_poi=list(entry.reaction_to_poi),
        entry_type=entry.entry_type,
        session=entry.session,
        psychology=list(entry.psychology),
        outcome=entry.outcome.value,
        rr_ratio=entry.rr_ratio,
        tradingview_chart_url=entry.tradingview_chart_url,
        tp=list(entry.tp),
        sl=list(entry.sl),
    )


def format_entry_line(entry: AIJournalEntry) -> str:
    """Render one journal entry as a prompt line."""
    line = (
        f"- Pair: {entry.pair}, Date: {entry.date}, Type: {entry.type}, "
        f"Premarket Condition(s): {', '.join(entry.premarket_condition)}, "
        f"POI: {', '.join(entry.poi)}, "
        f"Reaction to POI: {', '.join(entry.reaction_to_poi)}, "
        f"Entry Type: {entry.entry_type}, Session: {entry.session}, "
        f"Psychology: {', '.join(entry.psychology) or 'N/A'}, "
        f"Outcome: {entry.outcome}"
    )
    if entry.rr_ratio:
        line += f", RR Ratio: {entry.rr_ratio:g}R"
    if entry.tradingview_chart_url:
        line += f", Chart: {entry.tradingview_chart_url}"
    if entry.tp:
        line += f", TP: {', '.join(entry.tp)}"
    if entry.sl:
        line += f", SL: {', '.join(entry.sl)}"
    return line


def build_prompt(entries: Iterable[AIJournalEntry]) -> str:
    """Build the analysis request listing every journal entry."""
    lines = "\n".join(format_entry_line(e) for e in entries)
    return (
        "Analyze the following trading journal entries and suggest strategies "
        "for the recurring patterns.\n\n"
        f"Journal Entries:\n{lines}\n"
    )


def parse_output(output: Any) -> PatternAnalysisOutput:
    """Coerce the agent's final output into PatternAnalysisOutput.

    Raises:
        AnalysisError: If the output is missing or does not match the schema.
    """
    if output is None or output == "":
        raise AnalysisError(
            "AI model generated an empty or invalid response. "
            "The journal data could be problematic; please try again."
        )
    if isinstance(output, PatternAnalysisOutput):
        return output

    try:
        if isinstance(output, str):
            return PatternAnalysisOutput.model_validate_json(output)
        return PatternAnalysisOutput.model_validate(output)
    except ValidationError as e:
        raise AnalysisError(f"AI model response did not match the expected format: {e}") from e


class PatternAnalyzerAgent:
    """Agent for suggesting strategies from a trading journal.

    Confidence values proposed by the model are replaced with the
    deterministic score wherever a suggested combination matches journal
    entries, so the same journal always ranks the same way.
    """

    def __init__(self, model: Optional[str] = None):
        """Initialize the Pattern Analyzer Agent.

        Args:
            model: Optional model override.
        """
        self.model = model
        self._agent = self._create_agent()

    def _create_agent(self) -> Agent:
        """Create the underlying agent."""
        return create_agent(
            name="Pattern Analyzer Agent",
            instructions=PATTERN_ANALYZER_INSTRUCTIONS,
            model=self.model,
            output_type=PatternAnalysisOutput,
        )

    def _prepare(self, entries: list[JournalEntry]) -> str:
        if not configure_api_key():
            raise AnalysisError(
                "OpenAI API key not configured. Set openai.api_key in config.toml "
                "or the OPENAI_API_KEY environment variable."
            )
        logger.info("Analyzing %d journal entries", len(entries))
        return build_prompt(to_ai_entry(e) for e in entries)

    def _finish(self, output: Any, entries: list[JournalEntry]) -> list[SuggestedStrategy]:
        parsed = parse_output(output)
        logger.info("Model suggested %d strategies", len(parsed.suggested_strategies))
        rescored = rescore_strategies(parsed.suggested_strategies, entries)
        return sorted(rescored, key=lambda s: s.confidence, reverse=True)

    def analyze(self, entries: Iterable[JournalEntry]) -> list[SuggestedStrategy]:
        """Suggest strategies for the recurring patterns in a journal.

        Args:
            entries: Journal entries to analyze.

        Returns:
            Suggested strategies. Empty when there are no entries or the
            model found no recurring pattern.

        Raises:
            AnalysisError: If the provider fails or returns no usable output.
        """
        entries = list(entries)
        if not entries:
            return []

        prompt = self._prepare(entries)
        try:
            output = run_agent_sync(self._agent, prompt)
        except (AgentsException, OpenAIError) as e:
            logger.error("Pattern analysis failed: %s", e)
            raise AnalysisError(f"AI analysis failed: {e}") from e
        return self._finish(output, entries)

    async def analyze_async(self, entries: Iterable[JournalEntry]) -> list[SuggestedStrategy]:
        """Async variant of :meth:`analyze`."""
        entries = list(entries)
        if not entries:
            return []

        prompt = self._prepare(entries)
        try:
            output = await run_agent_async(self._agent, prompt)
        except (AgentsException, OpenAIError) as e:
            logger.error("Pattern analysis failed: %s", e)
            raise AnalysisError(f"AI analysis failed: {e}") from e
        return self._finish(output, entries)
