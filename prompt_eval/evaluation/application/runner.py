"""EvaluationRunner: drives the agentic tool loop for one definition and scores it."""

import asyncio
import time
import uuid
from collections.abc import Callable
from datetime import datetime, timezone

from prompt_eval.config.domain.definition import EvaluationDefinition
from prompt_eval.config.domain.execution import ExecutionConfig
from prompt_eval.evaluation.domain.observer import EvaluationObserver
from prompt_eval.evaluation.domain.result import SingleRunResult, Variant
from prompt_eval.evaluation.infrastructure.errors import AlternativePromptMissingError
from prompt_eval.llm.domain.client import LLMClient
from prompt_eval.llm.domain.message import LLMMessage, LLMResponse, TokenUsage
from prompt_eval.llm.infrastructure.errors import LLMTimeoutError
from prompt_eval.prompts.domain.loader import PromptLoader
from prompt_eval.prompts.infrastructure.errors import PromptNotFoundError
from prompt_eval.scoring.domain.outcome import DelegationDecision
from prompt_eval.scoring.domain.scorer import Scorer
from prompt_eval.tools.domain.executor import ToolExecutor
from prompt_eval.tools.domain.mocked_output import build_snapshots
from prompt_eval.tools.domain.recorded_call import RecordedToolCall
from prompt_eval.tools.domain.tool import ToolDefinition
from prompt_eval.tools.infrastructure.errors import LiveExecutorUnavailableError
from prompt_eval.tools.infrastructure.mocked import MockedToolExecutor
from prompt_eval.tools.infrastructure.recording import RecordingToolExecutor
from prompt_eval.tools.infrastructure.timeout import TimeoutToolExecutor

MAX_ITERATIONS_PLACEHOLDER = "[Max tool iterations reached without final response]"
DELEGATE_TOOL_NAME = "delegate"
SUPERVISOR_TARGET = "supervisor"

type ProgressCallback = Callable[[int, int, SingleRunResult], None]


class EvaluationRunner:
    """Executes runs of an EvaluationDefinition against the LLM and scores them.

    Every run gets its own RecordingToolExecutor, so runs may execute
    concurrently without sharing call logs. The live executor, when given,
    backs live and capture runs and supplies the tool catalog for mocked runs.
    """

    def __init__(
        self,
        llm_client: LLMClient,
        prompt_loader: PromptLoader,
        scorer: Scorer,
        observer: EvaluationObserver,
        execution: ExecutionConfig,
        live_executor: ToolExecutor | None = None,
    ) -> None:
        self._llm_client = llm_client
        self._prompt_loader = prompt_loader
        self._scorer = scorer
        self._observer = observer
        self._execution = execution
        self._live_executor = live_executor

    async def execute_run(
        self,
        definition: EvaluationDefinition,
        variant: Variant = "baseline",
        run_id: str | None = None,
    ) -> SingleRunResult:
        """Run the tool loop once for variant and return the scored result.

        Raises:
            AlternativePromptMissingError: variant is "alternative" but the
                definition has none.
            LiveExecutorUnavailableError: live or capture mode without a live
                executor.
            PromptEvalError: any other configuration, LLM or tool failure.
        """
        evaluation_id = definition.metadata.id
        run_id = run_id or f"{evaluation_id}-{variant}-{uuid.uuid4().hex[:8]}"
        self._observer.run_started(
            evaluation_id=evaluation_id,
            run_id=run_id,
            variant=variant,
            tool_mode=definition.tool_mode,
        )

        timestamp = datetime.now(timezone.utc)
        started_at = time.monotonic()
        try:
            system_prompt = self._load_prompt(definition=definition, variant=variant)
            executor = self._build_executor(definition=definition)
            response, usage = await self._run_tool_loop(
                definition=definition,
                run_id=run_id,
                system_prompt=system_prompt,
                executor=executor,
            )
            calls = executor.get_recorded_calls()
            decision = self._parse_delegation(definition=definition, calls=calls)
            scoring = await self._scorer.score(
                definition=definition,
                response=response,
                calls=calls,
                decision=decision,
            )
        except Exception as exc:
            self._observer.run_failed(
                evaluation_id=evaluation_id,
                run_id=run_id,
                variant=variant,
                reason=str(exc),
            )
            raise

        latency_ms = int((time.monotonic() - started_at) * 1000)
        result = SingleRunResult(
            run_id=run_id,
            timestamp=timestamp,
            variant=variant,
            raw_response=response,
            tool_calls=scoring.tool_call_results,
            tool_selection_score=scoring.tool_selection_score,
            parameter_score=scoring.parameter_score,
            response_quality_score=scoring.response_quality_score,
            delegation_score=scoring.delegation_score,
            overall_score=scoring.overall_score,
            element_results=scoring.element_results,
            constraint_violations=scoring.constraint_violations,
            latency_ms=latency_ms,
            token_usage=usage,
            delegation_decision=decision,
            captured_snapshots=(
                build_snapshots(calls) if definition.tool_mode == "capture" else None
            ),
        )

        self._observer.run_completed(
            evaluation_id=evaluation_id,
            run_id=run_id,
            variant=variant,
            overall_score=result.overall_score,
            latency_ms=latency_ms,
            tool_call_count=len(calls),
        )
        return result

    async def execute_multiple_runs(
        self,
        definition: EvaluationDefinition,
        variant: Variant = "baseline",
        count: int | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> list[SingleRunResult]:
        """Execute count independent runs and return their results in run order.

        A run that raises is converted into a zero-scored result carrying the
        error, so one failure never aborts the batch. An on_progress callback
        that raises is reported to the observer and the batch carries on. Runs
        execute one at a time unless execution.max_concurrent is greater than 1.
        """
        evaluation_id = definition.metadata.id
        total = count if count is not None else self._execution.runs
        self._observer.batch_started(
            evaluation_id=evaluation_id, variant=variant, total_runs=total
        )
        started_at = time.monotonic()

        results: list[SingleRunResult | None] = [None] * total
        sem = asyncio.Semaphore(self._execution.max_concurrent)
        completed_count: list[int] = [0]
        failed_count: list[int] = [0]
        progress_lock = asyncio.Lock()

        async def run_one(index: int) -> None:
            run_id = f"{evaluation_id}-{variant}-run{index + 1}"
            async with sem:
                try:
                    result = await self.execute_run(
                        definition=definition, variant=variant, run_id=run_id
                    )
                except Exception as exc:
                    result = _failed_result(run_id=run_id, variant=variant, exc=exc)
                    failed_count[0] += 1

            async with progress_lock:
                results[index] = result
                completed_count[0] += 1
                self._observer.batch_progress(
                    evaluation_id=evaluation_id,
                    variant=variant,
                    completed=completed_count[0],
                    total=total,
                )
                if on_progress is not None:
                    try:
                        on_progress(completed_count[0], total, result)
                    except Exception as exc:
                        self._observer.progress_callback_failed(
                            evaluation_id=evaluation_id,
                            variant=variant,
                            reason=str(exc),
                        )

        async with asyncio.TaskGroup() as tg:
            for index in range(total):
                tg.create_task(run_one(index))

        finished = [result for result in results if result is not None]
        self._observer.batch_completed(
            evaluation_id=evaluation_id,
            variant=variant,
            total_runs=len(finished),
            failed_runs=failed_count[0],
            elapsed_seconds=time.monotonic() - started_at,
        )
        return finished

    def _load_prompt(self, definition: EvaluationDefinition, variant: Variant) -> str:
        reference = definition.target
        if variant == "alternative":
            if definition.alternative is None:
                raise AlternativePromptMissingError(
                    evaluation_id=definition.metadata.id
                )
            reference = definition.alternative

        try:
            return self._prompt_loader.load(reference)
        except PromptNotFoundError as exc:
            self._observer.prompt_fallback_used(
                evaluation_id=definition.metadata.id,
                variant=variant,
                target=definition.metadata.target,
                reason=str(exc),
            )
            return self._prompt_loader.load_for_target(definition.metadata.target)

    def _build_executor(self, definition: EvaluationDefinition) -> RecordingToolExecutor:
        inner: ToolExecutor
        if definition.tool_mode == "mocked":
            inner = MockedToolExecutor(
                tools=self._mocked_catalog(definition=definition),
                outputs=definition.mocked_outputs,
            )
        elif self._live_executor is None:
            raise LiveExecutorUnavailableError(tool_mode=definition.tool_mode)
        else:
            inner = self._live_executor

        if self._execution.tool_timeout_seconds is not None:
            inner = TimeoutToolExecutor(
                inner=inner, timeout_seconds=self._execution.tool_timeout_seconds
            )
        return RecordingToolExecutor(inner=inner)

    def _mocked_catalog(self, definition: EvaluationDefinition) -> list[ToolDefinition]:
        """Tools advertised in mocked mode: live catalog, declared tools, or synthesized."""
        if self._live_executor is not None:
            return self._live_executor.get_tools_for_llm()
        if definition.tools:
            return list(definition.tools)
        return [
            ToolDefinition(name=name, description=f"Mocked tool '{name}'")
            for name in definition.mocked_outputs
        ]

    async def _run_tool_loop(
        self,
        definition: EvaluationDefinition,
        run_id: str,
        system_prompt: str,
        executor: RecordingToolExecutor,
    ) -> tuple[str, TokenUsage]:
        messages = [
            LLMMessage(role=message.role, content=message.content)
            for message in definition.test_case.history
        ]
        messages.append(LLMMessage(role="user", content=definition.test_case.user_prompt))
        tools = executor.get_tools_for_llm()
        usage = TokenUsage()
        final_response: str | None = None

        for _ in range(self._execution.max_tool_iterations):
            response = await self._generate(
                messages=messages, system_prompt=system_prompt, tools=tools
            )
            if response.usage is not None:
                usage = usage + response.usage

            if not response.tool_use or response.stop_reason == "end_turn":
                return response.content, usage

            if response.content and response.stop_reason != "tool_use":
                final_response = response.content

            requests = [
                executor.create_request(
                    call_id=tool_use.id,
                    tool_name=tool_use.name,
                    parameters=tool_use.input,
                )
                for tool_use in response.tool_use
            ]
            results = await executor.execute_tools(requests)
            messages.append(
                LLMMessage(
                    role="assistant",
                    content=response.content,
                    tool_use=response.tool_use,
                )
            )
            messages.append(LLMMessage(role="tool", tool_results=results))

        self._observer.tool_iterations_exhausted(
            evaluation_id=definition.metadata.id,
            run_id=run_id,
            max_iterations=self._execution.max_tool_iterations,
        )
        return final_response or MAX_ITERATIONS_PLACEHOLDER, usage

    async def _generate(
        self,
        messages: list[LLMMessage],
        system_prompt: str,
        tools: list[ToolDefinition],
    ) -> LLMResponse:
        call = self._llm_client.generate_with_tools(
            messages=list(messages),
            system_prompt=system_prompt,
            tools=tools,
            max_tokens=self._execution.max_tokens,
        )
        timeout = self._execution.llm_timeout_seconds
        if timeout is None:
            return await call
        try:
            return await asyncio.wait_for(call, timeout=timeout)
        except TimeoutError as exc:
            raise LLMTimeoutError(timeout_seconds=timeout) from exc

    def _parse_delegation(
        self, definition: EvaluationDefinition, calls: list[RecordedToolCall]
    ) -> DelegationDecision | None:
        """Read the supervisor's delegation decision from its first delegate call."""
        if definition.metadata.target != SUPERVISOR_TARGET:
            return None
        delegate_call = next(
            (call for call in calls if call.tool_name == DELEGATE_TOOL_NAME), None
        )
        if delegate_call is None:
            return DelegationDecision(delegated=False)
        agent_type = delegate_call.parameters.get("type")
        rationale = delegate_call.parameters.get("rationale")
        return DelegationDecision(
            delegated=True,
            agent_type=str(agent_type) if agent_type is not None else None,
            rationale=str(rationale) if rationale is not None else None,
        )


def _failed_result(run_id: str, variant: Variant, exc: Exception) -> SingleRunResult:
    """Zero-scored stand-in for a run that raised."""
    return SingleRunResult(
        run_id=run_id,
        timestamp=datetime.now(timezone.utc),
        variant=variant,
        raw_response=f"Error: {exc}",
        tool_selection_score=0.0,
        parameter_score=0.0,
        response_quality_score=0.0,
        overall_score=0.0,
        constraint_violations=[f"Execution error: {exc}"],
        latency_ms=0,
    )
