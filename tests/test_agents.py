"""Tests for the pattern analyzer agent.

**Feature: trading-journal**
"""

import asyncio
from datetime import date
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from agents.exceptions import ModelBehaviorError

from helpers import make_entry
from tradeflow.agents.base import DEFAULT_MODEL, get_model
from tradeflow.agents.pattern_analyzer import (
    PatternAnalyzerAgent,
    build_prompt,
    parse_output,
    to_ai_entry,
)
from tradeflow.errors import AnalysisError
from tradeflow.models import Outcome, PatternAnalysisOutput


MODEL_OUTPUT = {
    "suggestedStrategies": [{
        "poiCombination": ["Order Block"],
        "reactionToPoiCombination": ["Strong Rejection"],
        "entryType": "Limit",
        "strategy": "Long: consider a Limit entry on a rejection from the Order Block.",
        "confidence": 0.95,
        "exampleTrades": [{"date": "2024-01-01", "outcome": "Win", "rrRatio": 2}],
    }]
}


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the real config file and API key out of the tests."""
    monkeypatch.setenv("TRADEFLOW_CONFIG_DIR", str(tmp_path))
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.delenv("OPENAI_MODEL", raising=False)


@pytest.fixture
def mock_runner():
    """Patch the SDK runner used by the agent helpers."""
    with patch("tradeflow.agents.base.Runner") as runner, \
            patch("tradeflow.agents.base.set_default_openai_key"):
        yield runner


def _result(final_output):
    result = MagicMock()
    result.final_output = final_output
    return result


class TestPromptBuilding:
    def test_ai_entry_uses_schema_names(self):
        ai_entry = to_ai_entry(make_entry(date=date(2024, 3, 5), rr_ratio=2.5))
        dumped = ai_entry.model_dump(by_alias=True)

        assert dumped["date"] == "2024-03-05"
        assert dumped["type"] == "Long"
        assert dumped["reactionToPoi"] == ["Strong Rejection"]
        assert dumped["rrRatio"] == 2.5

    def test_prompt_lists_every_entry(self):
        entries = [
            make_entry(pair="EUR/USD", rr_ratio=2.5, psychology=[]),
            make_entry(pair="GBP/USD", rr_ratio=None, psychology=["Calm", "Focused"]),
        ]

        prompt = build_prompt(to_ai_entry(e) for e in entries)

        assert "Pair: EUR/USD" in prompt
        assert "Pair: GBP/USD" in prompt
        assert "RR Ratio: 2.5R" in prompt
        assert "Psychology: N/A" in prompt
        assert "Psychology: Calm, Focused" in prompt
        assert prompt.count("\n- Pair:") == 2


class TestParseOutput:
    @pytest.mark.parametrize("output", [None, ""])
    def test_empty_output_is_error(self, output):
        with pytest.raises(AnalysisError, match="empty or invalid"):
            parse_output(output)

    def test_dict_output(self):
        parsed = parse_output(MODEL_OUTPUT)
        assert parsed.suggested_strategies[0].entry_type == "Limit"

    def test_json_text_output(self):
        parsed = parse_output('{"suggestedStrategies": []}')
        assert parsed.suggested_strategies == []

    def test_schema_violation_is_error(self):
        with pytest.raises(AnalysisError, match="expected format"):
            parse_output({"suggestedStrategies": [{"poiCombination": "x"}]})


class TestPatternAnalyzerAgent:
    """
    **Feature: trading-journal, Property 21: Analysis Failure Modes**

    *For any* provider failure or unusable output, analysis raises
    AnalysisError; a successful empty answer is an empty list.
    """

    def test_empty_journal_skips_provider(self, mock_runner):
        assert PatternAnalyzerAgent().analyze([]) == []
        mock_runner.run_sync.assert_not_called()

    def test_confidence_rescored_from_journal(self, mock_runner):
        mock_runner.run_sync.return_value = _result(PatternAnalysisOutput.model_validate(MODEL_OUTPUT))

        strategies = PatternAnalyzerAgent().analyze([make_entry(outcome=Outcome.WIN, rr_ratio=2)])

        assert len(strategies) == 1
        assert strategies[0].confidence == pytest.approx(0.6)
        mock_runner.run_sync.assert_called_once()

    def test_results_ranked_by_rescored_confidence(self, mock_runner):
        fvg = {
            **MODEL_OUTPUT["suggestedStrategies"][0],
            "poiCombination": ["FVG"],
            "confidence": 0.5,
        }
        output = {"suggestedStrategies": [MODEL_OUTPUT["suggestedStrategies"][0], fvg]}
        mock_runner.run_sync.return_value = _result(output)
        entries = [
            make_entry(poi=["Order Block"], outcome=Outcome.LOSS, rr_ratio=1),
            make_entry(poi=["FVG"], outcome=Outcome.WIN, rr_ratio=2),
        ]

        strategies = PatternAnalyzerAgent().analyze(entries)

        assert [s.poi_combination for s in strategies] == [["FVG"], ["Order Block"]]
        assert strategies[0].confidence == pytest.approx(0.6)
        assert strategies[1].confidence == pytest.approx(0.0)

    def test_empty_result_is_not_an_error(self, mock_runner):
        mock_runner.run_sync.return_value = _result(PatternAnalysisOutput(suggested_strategies=[]))

        assert PatternAnalyzerAgent().analyze([make_entry()]) == []

    def test_no_output_is_error(self, mock_runner):
        mock_runner.run_sync.return_value = _result(None)

        with pytest.raises(AnalysisError):
            PatternAnalyzerAgent().analyze([make_entry()])

    def test_provider_error_is_analysis_error(self, mock_runner):
        mock_runner.run_sync.side_effect = ModelBehaviorError("bad json")

        with pytest.raises(AnalysisError, match="bad json"):
            PatternAnalyzerAgent().analyze([make_entry()])

    def test_missing_api_key(self, mock_runner, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY")

        with pytest.raises(AnalysisError, match="API key"):
            PatternAnalyzerAgent().analyze([make_entry()])
        mock_runner.run_sync.assert_not_called()

    def test_async_analysis(self, mock_runner):
        mock_runner.run = AsyncMock(return_value=_result(MODEL_OUTPUT))

        strategies = asyncio.run(
            PatternAnalyzerAgent().analyze_async([make_entry(outcome=Outcome.WIN, rr_ratio=2)])
        )

        assert strategies[0].confidence == pytest.approx(0.6)

    def test_model_override(self):
        assert PatternAnalyzerAgent(model="gpt-4o-mini")._agent.model == "gpt-4o-mini"


class TestModelSelection:
    def test_default_model(self):
        assert get_model() == DEFAULT_MODEL

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("OPENAI_MODEL", "o3-mini")
        assert get_model() == "o3-mini"

    def test_config_model(self, tmp_path):
        (tmp_path / "config.toml").write_text('[openai]\nmodel = "gpt-4.1"\n')
        assert get_model() == "gpt-4.1"
