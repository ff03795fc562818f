"""EvaluationDefinition aggregate: one test case plus everything needed to score it.

Definition files written for the assistant platform use camelCase keys; every
model here accepts camelCase aliases as well as the snake_case field names.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from prompt_eval.tools.domain.mocked_output import MockedToolOutput
from prompt_eval.tools.domain.tool import ToolDefinition

type ToolMode = Literal["mocked", "live", "capture"]
type MatchType = Literal["exact", "contains", "regex", "semantic", "range"]


class _DefinitionModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )


class EvaluationMetadata(_DefinitionModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str = ""
    target: str = "supervisor"
    tags: list[str] = Field(default_factory=list)


class PromptReference(_DefinitionModel):
    """Where a system prompt comes from: a named prompt file or inline text."""

    source: Literal["file", "inline"] = "file"
    prompt: str | None = None
    content: str | None = None

    @model_validator(mode="after")
    def _check_source_payload(self) -> "PromptReference":
        if self.source == "file" and not self.prompt:
            raise ValueError("file prompt reference requires 'prompt'")
        if self.source == "inline" and self.content is None:
            raise ValueError("inline prompt reference requires 'content'")
        return self


class HistoryMessage(_DefinitionModel):
    role: Literal["user", "assistant"]
    content: str


class TestCase(_DefinitionModel):
    __test__ = False  # not a pytest test class

    user_prompt: str = Field(min_length=1)
    history: list[HistoryMessage] = Field(default_factory=list)


class ParameterExpectation(_DefinitionModel):
    """How one tool-call parameter is expected to look.

    match_type may be omitted: it then means "range" when min or max is set,
    and "exact" otherwise.
    """

    match_type: MatchType | None = None
    expected: Any = None
    pattern: str | None = None
    min: float | None = None
    max: float | None = None

    @property
    def resolved_match_type(self) -> MatchType:
        if self.match_type is not None:
            return self.match_type
        if self.min is not None or self.max is not None:
            return "range"
        return "exact"


class ExpectedTool(_DefinitionModel):
    name: str = Field(min_length=1)
    required: bool = True
    parameters: dict[str, ParameterExpectation] = Field(default_factory=dict)


class ToolExpectations(_DefinitionModel):
    expected_tools: list[ExpectedTool] = Field(default_factory=list)
    forbidden_tools: list[str] = Field(default_factory=list)


class ResponseElement(_DefinitionModel):
    """A discrete, weighted aspect the response is expected to contain."""

    id: str = Field(min_length=1)
    description: str = ""
    weight: float = Field(default=1.0, ge=0.0)
    keywords: list[str] = Field(default_factory=list)


class ResponseConstraints(_DefinitionModel):
    max_length: int | None = Field(default=None, ge=0)
    min_length: int | None = Field(default=None, ge=0)
    forbidden_patterns: list[str] = Field(default_factory=list)


class ResponseExpectations(_DefinitionModel):
    required_elements: list[ResponseElement] = Field(default_factory=list)
    optional_elements: list[ResponseElement] = Field(default_factory=list)
    constraints: ResponseConstraints | None = None


class DelegationExpectations(_DefinitionModel):
    should_delegate: bool
    expected_agent_type: str | None = None
    delegation_rationale_should_mention: list[str] = Field(default_factory=list)


class DimensionWeight(_DefinitionModel):
    weight: float = Field(default=1.0, ge=0.0)


class ScoringConfig(_DefinitionModel):
    """Relative weight of each scoring dimension; unspecified dimensions weigh 1.0."""

    tool_selection: DimensionWeight = Field(default_factory=DimensionWeight)
    parameters: DimensionWeight = Field(default_factory=DimensionWeight)
    response_quality: DimensionWeight = Field(default_factory=DimensionWeight)
    delegation: DimensionWeight = Field(default_factory=DimensionWeight)


class EvaluationDefinition(_DefinitionModel):
    """Immutable input of an evaluation: test case, expectations, and tool mode."""

    version: str = "1.0"
    metadata: EvaluationMetadata
    target: PromptReference
    alternative: PromptReference | None = None
    test_case: TestCase
    tool_expectations: ToolExpectations | None = None
    response_expectations: ResponseExpectations | None = None
    delegation_expectations: DelegationExpectations | None = None
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    tool_mode: ToolMode = "mocked"
    mocked_outputs: dict[str, MockedToolOutput] = Field(default_factory=dict)
    tools: list[ToolDefinition] = Field(default_factory=list)
