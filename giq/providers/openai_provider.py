from __future__ import annotations

from typing import TYPE_CHECKING

import openai

from .base import DEFAULT_PROVIDER, Backend, Field, register

if TYPE_CHECKING:  # pragma: no cover
    from ..config import GiqConfig

DEFAULT_MODEL = "gpt-3.5-turbo"


def _make_client(cfg: "GiqConfig") -> openai.OpenAI:
    return openai.OpenAI(api_key=cfg.ai_key, base_url=cfg.ai_base_url or None)


def _resolve_model(cfg: "GiqConfig") -> str:
    return cfg.ai_model or DEFAULT_MODEL


OPENAI = register(
    Backend(
        name=DEFAULT_PROVIDER,
        title="OpenAI",
        fields=(Field("ai_key", "OpenAI API Key"),),
        make_client=_make_client,
        resolve_model=_resolve_model,
        incomplete_message="OpenAI API key is not configured",
    )
)
