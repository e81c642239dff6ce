"""Environment-driven defaults for rpncalc runs.

Every CLI option has an RPNCALC_* variable behind it; command-line flags win.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from rpncalc.evaluator import ErrorPolicy

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off", "")


@dataclass
class Settings:
    """Resolved configuration for one CLI invocation."""

    on_error: ErrorPolicy = ErrorPolicy.HALT
    aliases: bool = True
    comments: bool = True
    no_color: bool = False


def _flag(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{key}: expected a boolean, got {raw!r}")


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from environment variables.

    Args:
        env: Mapping to read instead of os.environ (tests pass a plain dict).

    Raises:
        ValueError: a variable holds a value that cannot be interpreted.
    """
    env = os.environ if env is None else env

    raw_policy = env.get("RPNCALC_ON_ERROR", ErrorPolicy.HALT.value).strip().lower()
    try:
        policy = ErrorPolicy(raw_policy)
    except ValueError:
        choices = ", ".join(p.value for p in ErrorPolicy)
        raise ValueError(f"RPNCALC_ON_ERROR: expected one of {choices}, got {raw_policy!r}")

    return Settings(
        on_error=policy,
        aliases=_flag(env, "RPNCALC_ALIASES", True),
        comments=_flag(env, "RPNCALC_COMMENTS", True),
        # NO_COLOR convention: any non-empty value disables colour
        no_color=bool(env.get("NO_COLOR")) or _flag(env, "RPNCALC_NO_COLOR", False),
    )
