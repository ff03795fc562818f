"""FilePromptLoader: reads system prompts from a prompts directory."""

from pathlib import Path

from prompt_eval.config.domain.definition import PromptReference
from prompt_eval.prompts.infrastructure.errors import PromptNotFoundError


class FilePromptLoader:
    """Resolves file references relative to prompts_dir and returns inline text as-is.

    Targets map to "<name>.md": "supervisor" -> supervisor.md and
    "sub-agent:researcher" -> researcher.md.

    Satisfies the PromptLoader protocol structurally.
    """

    def __init__(self, prompts_dir: Path) -> None:
        self._prompts_dir = prompts_dir

    def load(self, reference: PromptReference) -> str:
        if reference.source == "inline":
            assert reference.content is not None  # guaranteed by PromptReference
            return reference.content
        assert reference.prompt is not None  # guaranteed by PromptReference
        return self._read(name=reference.prompt)

    def load_for_target(self, target: str) -> str:
        name = target.split(":", 1)[-1]
        return self._read(name=f"{name}.md")

    def _read(self, name: str) -> str:
        path = Path(name)
        if not path.is_absolute():
            path = self._prompts_dir / path
        if not path.is_file():
            raise PromptNotFoundError(name=name, searched=str(self._prompts_dir))
        return path.read_text(encoding="utf-8")
