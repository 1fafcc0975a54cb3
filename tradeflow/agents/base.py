"""Base utilities for AI agents.

This module provides common utilities for creating and running AI agents
using the OpenAI Agents SDK.
"""

import logging
import os
from typing import Any, Callable, Optional

# Disable tracing to avoid noisy 503 errors from telemetry
os.environ.setdefault("OPENAI_AGENTS_DISABLE_TRACING", "1")

from agents import Agent, AgentOutputSchema, Runner, set_default_openai_key

from tradeflow.config import get_openai_setting

logger = logging.getLogger(__name__)


# Default model to use for agents
DEFAULT_MODEL = "gpt-4o"


def get_model() -> str:
    """Get the model to use for agents.

    Checks the OPENAI_MODEL environment variable, then the [openai] model
    config value, and falls back to the default.

    Returns:
        Model name string.
    """
    return os.environ.get("OPENAI_MODEL") or get_openai_setting("model") or DEFAULT_MODEL


def get_api_key() -> Optional[str]:
    """Get the OpenAI API key from config, falling back to OPENAI_API_KEY.

    Returns:
        API key string or None if not configured.
    """
    return get_openai_setting("api_key") or os.environ.get("OPENAI_API_KEY")


def configure_api_key() -> bool:
    """Hand the configured API key to the SDK.

    Returns:
        False if no key is available.
    """
    api_key = get_api_key()
    if not api_key:
        return False
    set_default_openai_key(api_key)
    return True


def create_agent(
    name: str,
    instructions: str,
    tools: Optional[list[Callable[..., Any]]] = None,
    model: Optional[str] = None,
    output_type: Optional[type] = None,
) -> Agent:
    """Create an AI agent with the specified configuration.

    Args:
        name: Name of the agent.
        instructions: System instructions for the agent.
        tools: Optional list of tool functions the agent can use.
        model: Optional model override. Uses default if not specified.
        output_type: Optional pydantic model the final output must match.

    Returns:
        Configured Agent instance.
    """
    kwargs: dict[str, Any] = {}
    if output_type is not None:
        # Optional fields in the schema rule out strict mode
        kwargs["output_type"] = AgentOutputSchema(output_type, strict_json_schema=False)

    return Agent(
        name=name,
        instructions=instructions,
        tools=tools or [],
        model=model or get_model(),
        **kwargs,
    )


def _log_agent_call(agent: Agent) -> None:
    logger.info("Running agent %s with model %s", agent.name, agent.model)


def run_agent_sync(
    agent: Agent,
    message: str,
    context: Optional[dict[str, Any]] = None,
) -> Any:
    """Run an agent synchronously and return its final output.

    Args:
        agent: The agent to run.
        message: User message to send to the agent.
        context: Optional context dictionary to pass to the agent.

    Returns:
        The agent's final output: text, or an instance of its output type.
    """
    _log_agent_call(agent)
    result = Runner.run_sync(agent, message, context=context)
    return result.final_output


async def run_agent_async(
    agent: Agent,
    message: str,
    context: Optional[dict[str, Any]] = None,
) -> Any:
    """Run an agent asynchronously and return its final output.

    Args:
        agent: The agent to run.
        message: User message to send to the agent.
        context: Optional context dictionary to pass to the agent.

    Returns:
        The agent's final output: text, or an instance of its output type.
    """
    _log_agent_call(agent)
    result = await Runner.run(agent, message, context=context)
    return result.final_output
