"""Resolves a 'module:attribute' reference to a live ToolExecutor."""

import importlib

from prompt_eval.tools.domain.executor import ToolExecutor
from prompt_eval.tools.infrastructure.errors import LiveExecutorImportError


def import_live_executor(reference: str) -> ToolExecutor:
    """Import the attribute named by reference and return it as a ToolExecutor.

    The attribute may be an executor instance, a class, or a zero-argument
    factory; classes and factories are called once.

    Raises:
        LiveExecutorImportError: if the reference is malformed, the module or
            attribute is missing, or the result does not look like an executor.
    """
    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise LiveExecutorImportError(
            reference=reference, reason="expected 'module:attribute'"
        )

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise LiveExecutorImportError(reference=reference, reason=str(exc)) from exc

    try:
        target = getattr(module, attribute)
    except AttributeError as exc:
        raise LiveExecutorImportError(
            reference=reference,
            reason=f"module '{module_name}' has no attribute '{attribute}'",
        ) from exc

    if isinstance(target, type) or (
        callable(target) and not hasattr(target, "execute_tool")
    ):
        target = target()

    missing = [
        name
        for name in ("get_tools_for_llm", "create_request", "execute_tool", "execute_tools")
        if not callable(getattr(target, name, None))
    ]
    if missing:
        raise LiveExecutorImportError(
            reference=reference,
            reason=f"object is missing ToolExecutor methods: {', '.join(missing)}",
        )
    return target
