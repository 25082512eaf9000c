from __future__ import annotations

import json
import logging

from result import Err, Ok, Result

from psearch.config.defaults import default_config
from psearch.config.schema import AppConfig
from psearch.services.fs import DEFAULT_FS, FileSystem

logger = logging.getLogger(__name__)

CONFIG_PATH = "~/.config/psearch/config.json"

_KNOWN_KEYS = frozenset(default_config().to_dict())


def load_config(path: str | None = None, fs: FileSystem = DEFAULT_FS) -> Result[AppConfig, str]:
    """Load the JSON config at *path*, falling back to defaults when it does not exist.

    Each failure stage (read, parse, shape, field types) gets its own message so
    the CLI warning names what is wrong.
    """
    resolved = fs.expanduser(path or CONFIG_PATH)
    if not fs.exists(resolved):
        logger.debug("No config at %s, using defaults", resolved)
        return Ok(default_config())

    try:
        text = fs.read_text(resolved)
    except (OSError, UnicodeDecodeError) as exc:
        return Err(f"Failed reading config at {resolved}: {exc}.")

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        return Err(f"Config at {resolved} is not valid JSON: {exc}.")
    if not isinstance(payload, dict):
        return Err(f"Config at {resolved} must be a JSON object.")

    unknown = sorted(set(payload) - _KNOWN_KEYS)
    if unknown:
        logger.warning("Ignoring unknown config keys in %s: %s", resolved, ", ".join(unknown))

    try:
        return Ok(AppConfig.from_dict(payload, default_config()))
    except (ValueError, TypeError) as exc:
        return Err(f"Invalid config at {resolved}: {exc}.")


def sample_config_json() -> str:
    return json.dumps(default_config().to_dict(), indent=2)
