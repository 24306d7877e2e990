"""Loading of `key=value` property sources.

Syntax, one entry per line:

    # comment
    example.name=John Doe
    example.greet=Hello ${example.name}

Placeholders are replaced by keys defined earlier in the same text or in the
mapping passed in. Values are kept as strings.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ._errors import PropertyNotFoundError


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    import os
    from collections.abc import Mapping

_PLACEHOLDER = re.compile(r"\$\{([^}]*)\}")


def parse_properties(
    text: str,
    properties: Mapping[str, Any] | None = None,
    *,
    source: str = "<string>",
) -> dict[str, str]:
    known: dict[str, Any] = dict(properties or {})
    parsed: dict[str, str] = {}

    def substitute(match: re.Match[str]) -> str:
        key = match.group(1).strip()
        if key not in known:
            raise PropertyNotFoundError(key, source)
        return str(known[key])

    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            msg = f"{source}:{lineno}: expected 'key=value', got {raw!r}"
            raise ValueError(msg)

        resolved = _PLACEHOLDER.sub(substitute, value.strip())
        known[key] = parsed[key] = resolved

    return parsed


def load_properties(path: str | os.PathLike[str], properties: Mapping[str, Any] | None = None) -> dict[str, str]:
    path = Path(path)
    parsed = parse_properties(path.read_text(encoding="utf-8"), properties, source=str(path))
    logger.debug("Loaded %d properties from %s", len(parsed), path)
    return parsed
