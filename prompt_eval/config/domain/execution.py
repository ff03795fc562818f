"""Execution configuration models."""

from pydantic import BaseModel, Field


class ExecutionConfig(BaseModel, frozen=True):
    runs: int = Field(default=5, ge=1)
    max_tool_iterations: int = Field(default=10, ge=1)
    max_tokens: int = Field(default=4096, ge=1)
    max_concurrent: int = Field(default=1, ge=1)
    llm_timeout_seconds: float | None = Field(default=120.0, gt=0)
    tool_timeout_seconds: float | None = Field(default=60.0, gt=0)
    significance_level: float = Field(default=0.05, gt=0.0, lt=1.0)
