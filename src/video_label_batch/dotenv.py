"""Load defaults for ``VIDEO_LABELS_*`` and Google credential variables from a shared file.

Values in ``~/.config/video-label-batch/.env`` are injected into the process
environment only when the variable is unset or blank, so an exported shell
variable always wins.
"""

from __future__ import annotations

import os
from pathlib import Path

DEFAULT_ENV_PATH = Path.home() / ".config" / "video-label-batch" / ".env"


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        return value[1:-1]
    return value


def parse_dotenv(path: Path) -> dict[str, str]:
    """Parse a ``.env`` file into a dict of key-value pairs.

    Understands ``KEY=VALUE``, quoted values, an optional ``export`` prefix,
    blank lines and ``#`` comments. Lines without ``=`` are skipped.
    """
    result: dict[str, str] = {}
    if not path.is_file():
        return result

    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        line = line.removeprefix("export ").lstrip()
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            continue
        result[key] = _strip_quotes(value.strip())
    return result


def load_dotenv(path: Path | None = None) -> dict[str, str]:
    """Inject vars from *path* (default :data:`DEFAULT_ENV_PATH`) into ``os.environ``.

    Returns:
        Dict of vars that were actually injected.
    """
    parsed = parse_dotenv(path or DEFAULT_ENV_PATH)
    injected: dict[str, str] = {}
    for key, value in parsed.items():
        if os.environ.get(key, "").strip():
            continue
        os.environ[key] = value
        injected[key] = value
    return injected
