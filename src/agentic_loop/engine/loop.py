"""Turn-by-turn decision loop driving one agent run."""

import logging
from dataclasses import dataclass
from time import perf_counter
from typing import Callable, List, Optional, Sequence

from agentic_loop.domain.decision import (
    AskUserDecision,
    CallToolDecision,
    Decision,
    StopDecision,
    decision_to_wire,
)
from agentic_loop.domain.error_sanitizer import build_exception_details, describe_error
from agentic_loop.domain.exceptions import ConfigurationError, ProviderError
from agentic_loop.domain.loop_config import LoopConfig
from agentic_loop.domain.loop_result import LoopReason, LoopResult
from agentic_loop.domain.messages import AgentMessage
from agentic_loop.domain.model_target import ModelTarget
from agentic_loop.domain.state import AgentState, current_time_ms
from agentic_loop.domain.tool import ToolContext
from agentic_loop.engine.context_window import apply_message_window
from agentic_loop.engine.repeat_guard import RepeatedDecisionGuard
from agentic_loop.engine.retry import SleepFn, retry_async
from agentic_loop.engine.termination_policy import evaluate_policy
from agentic_loop.engine.tool_registry import ToolRegistry
from agentic_loop.llm.decision_client import DecisionClient
from agentic_loop.llm.llm_retry_policy import ORACLE_RETRY_POLICY, is_retryable_error
from agentic_loop.llm.model_router import ModelRouter, StaticModelRouter
from agentic_loop.observability.metrics import MetricsCollector, NullMetricsCollector

logger = logging.getLogger(__name__)

REPEATED_DECISION_STOP_MESSAGE = (
    "Stopping loop after repeated identical tool decisions."
)


@dataclass
class LoopDependencies:
    """Collaborators injected into the loop engine.

    Only ``decision_client`` and ``tool_registry`` are required. Metrics default
    to a no-op collector and logging to this module's logger.
    """

    decision_client: DecisionClient
    tool_registry: ToolRegistry
    model_router: Optional[ModelRouter] = None
    metrics: Optional[MetricsCollector] = None
    logger: Optional[logging.Logger] = None
    on_step: Optional[Callable[[int], None]] = None
    sleep: Optional[SleepFn] = None
    clock: Optional[Callable[[], int]] = None


class LoopEngine:
    """
    Runs the decision loop for one conversation state at a time.

    The engine holds no run state of its own; each ``run`` call owns the
    AgentState it is given until it returns.

    Args:
        deps: Injected collaborators.
    """

    def __init__(self, deps: LoopDependencies) -> None:
        self.deps = deps
        self.metrics: MetricsCollector = deps.metrics or NullMetricsCollector()
        self.logger = deps.logger or logger
        self._clock = deps.clock or current_time_ms

    async def run(
        self,
        session_id: str,
        config: LoopConfig,
        user_input: Optional[str] = None,
        system_prompt: Optional[str] = None,
        state: Optional[AgentState] = None,
        agent_id: Optional[str] = None,
    ) -> LoopResult:
        """
        Starts a new run or resumes a paused one.

        Args:
            session_id: Stable session identifier.
            config: Loop ceilings and oracle targets.
            user_input: New user message; required when starting.
            system_prompt: System prompt; required when starting.
            state: Prior state to resume.
            agent_id: Optional agent label for a new run.

        Returns:
            LoopResult holding the final state and the stop reason.

        Raises:
            ConfigurationError: If a new run lacks a system prompt or user input.
        """
        resumed = state is not None
        state = self._prepare_state(
            session_id=session_id,
            user_input=user_input,
            system_prompt=system_prompt,
            state=state,
            agent_id=agent_id,
        )
        agent_tag = {"agent_id": state.agent_id or "unknown"}
        if resumed:
            self.metrics.increment("loop_resumed_total", 1, agent_tag)
        else:
            self.logger.info(
                "loop.start",
                extra={
                    "agent_id": state.agent_id,
                    "session_id": state.session_id,
                    "max_steps": config.max_steps,
                    "max_tool_calls": config.max_tool_calls,
                    "timeout_ms": config.timeout_ms,
                    "primary_model": str(config.primary_model),
                    "fallback_models": [str(t) for t in config.fallback_models],
                },
            )
            self.metrics.increment("loop_started_total", 1, agent_tag)

        router = self.deps.model_router or StaticModelRouter(
            config.primary_model, config.fallback_models
        )
        guard = RepeatedDecisionGuard(config.max_repeated_decision_signatures)

        try:
            return await self._run_turns(state, config, router, guard)
        except Exception as exc:
            error_message = describe_error(exc)
            state.append_message(
                AgentMessage.assistant(f"Loop failed: {error_message}")
            )
            self.logger.error(
                "loop.error",
                exc_info=exc,
                extra={
                    "session_id": state.session_id,
                    "step": state.step,
                    "error": error_message,
                    "error_details": build_exception_details(exc),
                },
            )
            self.metrics.increment("loop_errors_total")
            return LoopResult(state=state, reason=LoopReason.ERROR)

    def _prepare_state(
        self,
        session_id: str,
        user_input: Optional[str],
        system_prompt: Optional[str],
        state: Optional[AgentState],
        agent_id: Optional[str],
    ) -> AgentState:
        """Build a fresh state or prepare a prior one for resumption."""

        if state is not None:
            if state.done:
                return state
            # Human wait time between invocations must not consume the budget.
            state.reset_clock(self._clock())
            if user_input and user_input.strip():
                state.append_message(AgentMessage.user(user_input))
            return state

        if not system_prompt or not system_prompt.strip():
            raise ConfigurationError("system_prompt is required for initial loop run.")
        if not user_input or not user_input.strip():
            raise ConfigurationError("user_input is required for initial loop run.")
        return AgentState.initial(
            session_id=session_id,
            system_prompt=system_prompt,
            user_input=user_input,
            agent_id=agent_id,
            started_at_ms=self._clock(),
        )

    async def _run_turns(
        self,
        state: AgentState,
        config: LoopConfig,
        router: ModelRouter,
        guard: RepeatedDecisionGuard,
    ) -> LoopResult:
        """Execute turns until a terminal outcome is reached."""

        while True:
            check = evaluate_policy(state, config, now_ms=self._clock())
            if check.stop:
                reason = check.reason or LoopReason.POLICY_STOP
                self.logger.info(
                    "loop.stop",
                    extra={
                        "session_id": state.session_id,
                        "reason": reason.value,
                        "step": state.step,
                    },
                )
                self.metrics.increment(
                    "loop_stopped_total", 1, {"reason": reason.value}
                )
                return LoopResult(state=state, reason=reason)

            state.step += 1
            if self.deps.on_step is not None:
                self.deps.on_step(state.step)
            self.metrics.increment("loop_steps_total")
            self.logger.debug(
                "loop.step", extra={"session_id": state.session_id, "step": state.step}
            )

            window = apply_message_window(state.messages, config.max_messages)
            decision = await self._decide(state, router.get_route(), window)

            if isinstance(decision, CallToolDecision):
                result = await self._handle_tool_calls(state, config, guard, decision)
                if result is not None:
                    return result
                continue
            if isinstance(decision, AskUserDecision):
                return self._suspend_for_user(state, decision)
            if isinstance(decision, StopDecision):
                return self._finish(state, decision.message, LoopReason.POLICY_STOP)
            return self._finish(state, decision.message, LoopReason.COMPLETED)

    async def _decide(
        self,
        state: AgentState,
        route: Sequence[ModelTarget],
        window: List[AgentMessage],
    ) -> Decision:
        """
        Walks the route until one target yields a decision.

        Each target gets the oracle retry budget. Exhausting every target
        raises a non-retryable ProviderError that aborts the run.
        """
        last_error: Optional[BaseException] = None
        client = self.deps.decision_client

        for index, target in enumerate(route):
            started = perf_counter()
            try:
                decision = await retry_async(
                    lambda: client.decide_next_action(target, window),
                    policy=ORACLE_RETRY_POLICY,
                    should_retry=is_retryable_error,
                    sleep=self.deps.sleep,
                )
            except Exception as exc:
                last_error = exc
                self.metrics.increment(
                    "llm_failures_total",
                    1,
                    {"provider": target.provider, "model": target.model},
                )
                self.logger.warning(
                    "loop.model_attempt_failed",
                    extra={
                        "session_id": state.session_id,
                        "step": state.step,
                        "model": str(target),
                        "error": describe_error(exc),
                    },
                )
                continue

            self.metrics.timing(
                "llm_latency_ms",
                (perf_counter() - started) * 1000,
                {"provider": target.provider, "model": target.model},
            )
            if index > 0:
                self.metrics.increment(
                    "llm_fallback_success_total", 1, {"model_index": index}
                )
                self.logger.warning(
                    "loop.model_fallback_success",
                    extra={
                        "session_id": state.session_id,
                        "step": state.step,
                        "fallback_index": index,
                        "model": str(target),
                    },
                )
            self.logger.debug(
                "loop.decision",
                extra={
                    "session_id": state.session_id,
                    "step": state.step,
                    "model": str(target),
                    "action": decision.action,
                    "tool_call_count": (
                        len(decision.tool_calls)
                        if isinstance(decision, CallToolDecision)
                        else 0
                    ),
                    "decision": decision_to_wire(decision),
                },
            )
            return decision

        last_text = describe_error(last_error) if last_error else "unknown"
        raise ProviderError(
            f"All model attempts failed. Last error: {last_text}", retryable=False
        )

    async def _handle_tool_calls(
        self,
        state: AgentState,
        config: LoopConfig,
        guard: RepeatedDecisionGuard,
        decision: CallToolDecision,
    ) -> Optional[LoopResult]:
        """
        Runs one tool-call batch in the order the decision listed it.

        Returns:
            A terminal LoopResult, or None to continue with the next turn.
        """
        if decision.message:
            state.append_message(AgentMessage.assistant(decision.message))

        if guard.observe(decision.tool_calls):
            state.append_message(AgentMessage.assistant(REPEATED_DECISION_STOP_MESSAGE))
            state.mark_done(REPEATED_DECISION_STOP_MESSAGE)
            self.metrics.increment(
                "loop_stopped_total", 1, {"reason": LoopReason.POLICY_STOP.value}
            )
            self.logger.warning(
                "loop.repeated_decision_stop",
                extra={
                    "session_id": state.session_id,
                    "step": state.step,
                    "repeated_decision_count": guard.repeat_count,
                },
            )
            return LoopResult(state=state, reason=LoopReason.POLICY_STOP)

        context = ToolContext(session_id=state.session_id, step=state.step)
        for tool_call in decision.tool_calls:
            if state.tool_calls_used >= config.max_tool_calls:
                self.logger.warning(
                    "loop.max_tool_calls_reached",
                    extra={"session_id": state.session_id, "step": state.step},
                )
                self.metrics.increment(
                    "loop_stopped_total",
                    1,
                    {"reason": LoopReason.MAX_TOOL_CALLS.value},
                )
                return LoopResult(state=state, reason=LoopReason.MAX_TOOL_CALLS)

            started = perf_counter()
            result = await self.deps.tool_registry.execute(tool_call, context)
            state.tool_calls_used += 1
            tags = {"tool": result.tool_name, "ok": result.ok}
            self.metrics.increment("tool_calls_total", 1, tags)
            self.metrics.timing(
                "tool_latency_ms", (perf_counter() - started) * 1000, tags
            )
            if not result.ok:
                self.metrics.increment(
                    "tool_failures_total", 1, {"tool": result.tool_name}
                )
            self.logger.info(
                "loop.tool_result",
                extra={
                    "session_id": state.session_id,
                    "step": state.step,
                    "tool_name": result.tool_name,
                    "tool_call_id": result.tool_call_id,
                    "ok": result.ok,
                    "attempts": result.attempts,
                },
            )
            content = (
                result.content or ""
                if result.ok
                else f"Tool error: {result.error or 'unknown error'}"
            )
            state.append_message(
                AgentMessage.tool(
                    content, name=result.tool_name, tool_call_id=result.tool_call_id
                )
            )
        return None

    def _suspend_for_user(
        self, state: AgentState, decision: AskUserDecision
    ) -> LoopResult:
        """Append the question and return without marking the run done."""

        state.append_message(AgentMessage.assistant(decision.message))
        self.metrics.increment(
            "loop_awaiting_user_total", 1, {"agent_id": state.agent_id or "unknown"}
        )
        self.logger.info(
            "loop.awaiting_user",
            extra={
                "agent_id": state.agent_id,
                "session_id": state.session_id,
                "step": state.step,
                "reason": LoopReason.AWAITING_USER.value,
            },
        )
        return LoopResult(state=state, reason=LoopReason.AWAITING_USER)

    def _finish(self, state: AgentState, message: str, reason: LoopReason) -> LoopResult:
        """Append the final message, mark the run done and report ``reason``."""

        state.append_message(AgentMessage.assistant(message))
        state.mark_done(message)
        if reason == LoopReason.COMPLETED:
            self.metrics.increment("loop_completed_total")
            self.logger.info(
                "loop.complete",
                extra={
                    "session_id": state.session_id,
                    "step": state.step,
                    "reason": reason.value,
                },
            )
        else:
            self.metrics.increment("loop_stopped_total", 1, {"reason": reason.value})
            self.logger.info(
                "loop.stop",
                extra={
                    "session_id": state.session_id,
                    "step": state.step,
                    "reason": reason.value,
                },
            )
        return LoopResult(state=state, reason=reason)


async def run_loop(
    session_id: str,
    config: LoopConfig,
    deps: LoopDependencies,
    user_input: Optional[str] = None,
    system_prompt: Optional[str] = None,
    state: Optional[AgentState] = None,
    agent_id: Optional[str] = None,
) -> LoopResult:
    """Run the agent loop once with the given dependencies.

    See ``LoopEngine.run`` for argument semantics.
    """

    return await LoopEngine(deps).run(
        session_id=session_id,
        config=config,
        user_input=user_input,
        system_prompt=system_prompt,
        state=state,
        agent_id=agent_id,
    )
