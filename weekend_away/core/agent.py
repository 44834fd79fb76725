"""
Agentic loop with prompt-based tool calling.

Each turn sends the whole transcript to the completion provider, then either
runs the single tool the model asked for and feeds back an Observation, or
extracts the final answer. Malformed requests and tool failures are reported
back to the model as Observations so it can retry within the turn budget.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from ..config import AgentRunConfig
from ..providers.base import BaseProvider, Message, ProviderError
from .conversation import ConversationState
from .parser import ActionParser, ActionStep, FinalAnswer, MalformedAction
from .progress import ProgressObserver, ProgressTarget, as_observer, safe_notify
from .prompts import build_system_prompt, build_user_task
from .result import ResultExtractor
from .tool_registry import ToolRegistry

logger = logging.getLogger(__name__)

EMPTY_COMPLETION_MESSAGE = "I seem to be at a loss for words! Could you try again?"
BUDGET_EXHAUSTED_MESSAGE = "Sorry, I couldn't finalize the suggestions within the allowed steps."
UNEXPECTED_FORMAT_PREFIX = "I received an unexpected response. Here it is: "


class AgentState(Enum):
    """Per-turn states of the loop."""
    THINKING = "thinking"
    ACTION_PENDING = "action_pending"
    ANSWER_PENDING = "answer_pending"
    UNKNOWN_TOOL = "unknown_tool"
    BAD_ARGS = "bad_args"
    MISSING_ARGS = "missing_args"
    EXECUTING = "executing"


class RunOutcome(Enum):
    ANSWER = "answer"
    UNEXPECTED_FORMAT = "unexpected_format"
    EMPTY_COMPLETION = "empty_completion"
    BUDGET_EXHAUSTED = "budget_exhausted"
    COMPLETION_ERROR = "completion_error"


@dataclass(frozen=True)
class EventQuery:
    """What the caller wants recommendations for."""
    city: str
    timeframe_key: str  # opaque to the loop, e.g. "date:today"
    target_date: str  # YYYY-MM-DD


@dataclass(frozen=True)
class AgentResult:
    text: str
    outcome: RunOutcome
    iterations: int
    transcript: Tuple[Message, ...] = ()


class AgentLoop:
    """Drives a bounded Thought/Action/Observation conversation.

    The loop keeps no per-run state on the instance, so one AgentLoop (with
    its provider and registry) can serve concurrent runs.
    """

    def __init__(
        self,
        provider: BaseProvider,
        registry: ToolRegistry,
        config: Optional[AgentRunConfig] = None,
        parser: Optional[ActionParser] = None,
        extractor: Optional[ResultExtractor] = None,
    ):
        self.provider = provider
        self.registry = registry
        self.config = config or AgentRunConfig()
        self.parser = parser or ActionParser()
        self.extractor = extractor or ResultExtractor(strict=self.config.strict_answers)

    def new_conversation(self, query: EventQuery) -> ConversationState:
        return ConversationState(
            system_prompt=build_system_prompt(query.city, self.registry),
            user_task=build_user_task(query.city, query.timeframe_key, query.target_date),
        )

    async def run(self, query: EventQuery, observer: ProgressTarget = None) -> AgentResult:
        """
        Run the loop to a terminal outcome.

        Args:
            query: City, timeframe key and target date
            observer: Progress observer or ``callback(text)``

        Returns:
            AgentResult; budget exhaustion, empty completions and provider
            failures are outcomes, not exceptions
        """
        observer = as_observer(observer)
        conversation = self.new_conversation(query)
        max_iterations = self.config.max_iterations

        safe_notify(observer, f"Initializing agent for {query.city} with key: {query.timeframe_key}")

        for iteration in range(1, max_iterations + 1):
            safe_notify(observer, f"Iteration #{iteration}: Thinking...")
            logger.debug("--- Iteration %d ---", iteration)
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("Messages sent to provider: %s", json.dumps(conversation.to_payload(), indent=2))

            try:
                response_text = await self._request_completion(conversation)
            except ProviderError as e:
                safe_notify(observer, "An error occurred while processing your request.")
                return self._result(
                    f"Error communicating with AI: {e.message}",
                    RunOutcome.COMPLETION_ERROR, iteration, conversation,
                )

            logger.debug("Raw completion: %r", response_text)
            if not response_text:
                logger.warning("Provider returned an empty completion")
                conversation.append_assistant("")
                safe_notify(observer, "Agent provided an empty response. Ending interaction.")
                return self._result(EMPTY_COMPLETION_MESSAGE, RunOutcome.EMPTY_COMPLETION, iteration, conversation)

            conversation.append_assistant(response_text)
            step = self.parser.parse(response_text)

            if isinstance(step, FinalAnswer):
                logger.debug("State: %s", AgentState.ANSWER_PENDING.value)
                return self._finish(step.text, iteration, conversation, observer)

            logger.debug("State: %s", AgentState.ACTION_PENDING.value)
            state = await self._handle_action(step, conversation, observer)
            logger.debug("State: %s -> %s", state.value, AgentState.THINKING.value)

        safe_notify(observer, "Agent reached maximum iterations.")
        return self._result(BUDGET_EXHAUSTED_MESSAGE, RunOutcome.BUDGET_EXHAUSTED, max_iterations, conversation)

    async def _request_completion(self, conversation: ConversationState) -> Optional[str]:
        request = self.provider.complete(
            list(conversation.messages),
            model=self.config.model,
            temperature=self.config.temperature,
        )
        if self.config.timeout is None:
            return await request
        try:
            return await asyncio.wait_for(request, timeout=self.config.timeout)
        except asyncio.TimeoutError as e:
            raise ProviderError(
                f"completion request timed out after {self.config.timeout:g}s",
                getattr(self.provider, "name", ""),
            ) from e

    async def _handle_action(
        self,
        step: Union[ActionStep, MalformedAction],
        conversation: ConversationState,
        observer: ProgressObserver,
    ) -> AgentState:
        """Validate and execute one requested tool call, appending exactly one Observation."""
        tool_name = step.action.tool_name if isinstance(step, ActionStep) else step.tool_name

        tool = self.registry.get(tool_name)
        if tool is None:
            logger.warning("Agent tried to call unknown tool: %s", tool_name)
            safe_notify(observer, f"Error: Agent tried to use an invalid tool '{tool_name}'.")
            available = ", ".join(f"'{name}'" for name in self.registry.names()) or "none"
            conversation.append_observation(
                f"Error - Invalid tool '{tool_name}'. Available tools: {available}."
            )
            return AgentState.UNKNOWN_TOOL

        if isinstance(step, MalformedAction):
            logger.warning("Could not parse arguments for %s: %r (%s)", tool_name, step.raw_arguments, step.error)
            safe_notify(observer, f"Error understanding action arguments for {tool_name}.")
            conversation.append_observation(
                f"Error parsing the arguments JSON provided: '{step.raw_arguments}'. "
                f"Please ensure arguments are valid JSON ({step.error})."
            )
            return AgentState.BAD_ARGS

        args = step.action.arguments
        missing = tool.missing_arguments(args)
        if missing:
            names = ", ".join(f"'{key}'" for key in missing)
            logger.warning("Missing required arguments for %s: %s", tool_name, args)
            safe_notify(observer, f"Error: Missing {names} argument for {tool_name} tool.")
            conversation.append_observation(f"Error - Missing {names} in arguments for {tool_name}.")
            return AgentState.MISSING_ARGS

        safe_notify(observer, f"Calling tool: {tool_name} with args: {json.dumps(args)}")
        logger.info("Calling tool %s(%s)", tool_name, step.action.raw_arguments)
        try:
            invocation = tool.invoke(args)
            if self.config.timeout is None:
                result = await invocation
            else:
                result = await asyncio.wait_for(invocation, timeout=self.config.timeout)
        except asyncio.TimeoutError:
            logger.warning("Tool %s timed out", tool_name)
            safe_notify(observer, f"Error executing tool {tool_name}.")
            conversation.append_observation(
                f"Error running {tool_name}: timed out after {self.config.timeout:g}s"
            )
            return AgentState.EXECUTING
        except Exception as e:
            logger.warning("Tool %s failed: %s", tool_name, e, exc_info=True)
            safe_notify(observer, f"Error executing tool {tool_name}.")
            conversation.append_observation(f"Error running {tool_name}: {e}")
            return AgentState.EXECUTING

        conversation.append_observation(result)
        safe_notify(observer, f"Received observation from {tool_name}.")
        return AgentState.EXECUTING

    def _finish(self, text: str, iteration: int, conversation: ConversationState, observer) -> AgentResult:
        safe_notify(observer, "Agent finished. Processing final answer.")
        extracted = self.extractor.extract(text)
        if not extracted.expected_format:
            logger.warning("Final response did not start with %r", self.extractor.marker)
            safe_notify(observer, "Received an unexpected final response format.")
            return self._result(
                f"{UNEXPECTED_FORMAT_PREFIX}{extracted.text}",
                RunOutcome.UNEXPECTED_FORMAT, iteration, conversation,
            )
        return self._result(extracted.text, RunOutcome.ANSWER, iteration, conversation)

    @staticmethod
    def _result(text: str, outcome: RunOutcome, iterations: int, conversation: ConversationState) -> AgentResult:
        return AgentResult(text=text, outcome=outcome, iterations=iterations, transcript=conversation.messages)


async def run_agent(
    city: str,
    timeframe_key: str,
    target_date: str,
    on_progress: ProgressTarget = None,
    *,
    provider: Optional[BaseProvider] = None,
    registry: Optional[ToolRegistry] = None,
    config: Optional[AgentRunConfig] = None,
) -> str:
    """
    Recommend the two most exciting events for a city and day.

    Missing collaborators are built from settings.yaml and the environment.
    Never raises: every failure is returned as text and reported through
    ``on_progress``.

    Args:
        city: City as the event source expects it, e.g. "Sydney, New South Wales, Australia"
        timeframe_key: Event timeframe key, e.g. "date:today"
        target_date: Day of interest (YYYY-MM-DD)
        on_progress: Observer or ``callback(text)`` for progress lines

    Returns:
        The recommendation text, or a fallback/error message
    """
    observer = as_observer(on_progress)
    query = EventQuery(city=city, timeframe_key=timeframe_key, target_date=target_date)
    try:
        if provider is None or registry is None or config is None:
            return await _run_with_defaults(query, observer, provider, registry, config)
        result = await AgentLoop(provider, registry, config).run(query, observer)
        return result.text
    except Exception as e:
        logger.exception("Error in agent loop")
        safe_notify(observer, "An error occurred while processing your request.")
        return f"An unexpected error occurred: {e}"


async def _run_with_defaults(query, observer, provider, registry, config) -> str:
    """Fill in whichever collaborators the caller did not inject."""
    import httpx

    from ..config import load_config
    from ..providers import get_provider
    from ..tools import build_default_registry

    settings = load_config()
    if provider is None:
        provider_name = settings.get("provider", "openai")
        provider_cfg = (settings.get("providers", {}) or {}).get(provider_name, {}) or {}
        provider = get_provider(provider_name, base_url=provider_cfg.get("base_url"))
    if config is None:
        config = AgentRunConfig.from_config(settings)
        if not (settings.get("agent", {}) or {}).get("model"):
            # No model configured: use the provider's own default
            config = config.with_overrides(model=provider.model)

    if registry is not None:
        result = await AgentLoop(provider, registry, config).run(query, observer)
        return result.text

    async with httpx.AsyncClient(timeout=httpx.Timeout(30.0, connect=10.0)) as client:
        registry = build_default_registry(client, settings)
        result = await AgentLoop(provider, registry, config).run(query, observer)
    return result.text
