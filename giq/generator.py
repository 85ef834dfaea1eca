from __future__ import annotations

from typing import Callable, List

from .config import GiqConfig
from .prompts import status_prompt
from .providers import get_backend

COMMIT_SUGGESTIONS = 3
COMMIT_MAX_TOKENS = 64
STATUS_MAX_TOKENS = 128


def generate_suggestions(
    cfg: GiqConfig,
    prompt: str,
    count: int = COMMIT_SUGGESTIONS,
    max_tokens: int = COMMIT_MAX_TOKENS,
) -> List[str]:
    """Return up to ``count`` trimmed suggestions for ``prompt``.

    Raises ConfigurationError before any network access when the active
    provider is missing settings, TransportError when the call fails and
    EmptyResultError when the backend answers with nothing usable.
    """
    backend = get_backend(cfg.ai_provider)
    return backend.complete(cfg, prompt, count, max_tokens)


def generate_status_insight(
    cfg: GiqConfig,
    diff: str,
    generate: Callable[..., List[str]] = generate_suggestions,
) -> str:
    """Summarize a staged diff in one line using the status prompt."""
    insights = generate(cfg, status_prompt(diff), 1, STATUS_MAX_TOKENS)
    return insights[0].strip()
