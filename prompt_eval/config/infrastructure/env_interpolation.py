"""Environment substitution over parsed YAML/JSON data.

String values may reference ${NAME} or ${NAME:-fallback}. Substitution only
happens once every reference without a fallback resolves, so a file with
several unset variables reports all of them in one error.
"""

import os
import re
from collections.abc import Iterator, Mapping

from prompt_eval.config.infrastructure.errors import MissingEnvVarsError

_REFERENCE = re.compile(
    r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?::-(?P<fallback>[^}]*))?\}"
)

type RawValue = (
    str | int | float | bool | None | list["RawValue"] | dict[str, "RawValue"]
)


def iter_strings(data: RawValue) -> Iterator[str]:
    """Yield every string leaf of data, depth first."""
    if isinstance(data, str):
        yield data
    elif isinstance(data, list):
        for item in data:
            yield from iter_strings(item)
    elif isinstance(data, dict):
        for value in data.values():
            yield from iter_strings(value)


def unresolved_references(data: RawValue, environ: Mapping[str, str]) -> list[str]:
    """Names referenced without a fallback and absent from environ, first-seen order."""
    names: dict[str, None] = {}
    for text in iter_strings(data):
        for match in _REFERENCE.finditer(text):
            name = match["name"]
            if match["fallback"] is None and name not in environ:
                names.setdefault(name)
    return list(names)


def interpolate_env(
    data: RawValue, environ: Mapping[str, str] | None = None
) -> RawValue:
    """Return a copy of data with every reference replaced.

    Raises:
        MissingEnvVarsError: if any reference without a fallback is unset.
    """
    env = os.environ if environ is None else environ
    missing = unresolved_references(data, env)
    if missing:
        raise MissingEnvVarsError(missing)
    return _substitute(data, env)


def _substitute(data: RawValue, env: Mapping[str, str]) -> RawValue:
    if isinstance(data, str):
        return _REFERENCE.sub(
            lambda m: env.get(m["name"], m["fallback"] or ""), data
        )
    if isinstance(data, list):
        return [_substitute(item, env) for item in data]
    if isinstance(data, dict):
        return {key: _substitute(value, env) for key, value in data.items()}
    return data
