"""Top-level RunConfig: how evaluations are executed, independent of any definition."""

from pathlib import Path

from pydantic import BaseModel, Field

from prompt_eval.config.domain.execution import ExecutionConfig
from prompt_eval.config.domain.llm import LLMConfig


class RunConfig(BaseModel, frozen=True):
    llm: LLMConfig
    execution: ExecutionConfig = Field(default_factory=ExecutionConfig)
    prompts_dir: Path = Path("prompts")
