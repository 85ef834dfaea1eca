from __future__ import annotations

from typing import TYPE_CHECKING, Dict

import openai

from .base import Backend, Field, register

if TYPE_CHECKING:  # pragma: no cover
    from ..config import GiqConfig

REQUESTED_MODEL = "gpt-4o"


def _make_client(cfg: "GiqConfig") -> openai.AzureOpenAI:
    return openai.AzureOpenAI(
        api_key=cfg.azure_api_key,
        azure_endpoint=cfg.azure_endpoint,
        api_version=cfg.azure_api_version,
    )


def _resolve_model(cfg: "GiqConfig") -> str:
    # Azure addresses models by deployment name
    mapping: Dict[str, str] = {REQUESTED_MODEL: cfg.azure_deployment_id}
    return mapping.get(cfg.ai_model or REQUESTED_MODEL, cfg.azure_deployment_id)


AZURE_OPENAI = register(
    Backend(
        name="azure_openai",
        title="Azure OpenAI",
        fields=(
            Field("azure_endpoint", "Azure Endpoint"),
            Field("azure_deployment_id", "Azure Deployment ID"),
            Field("azure_api_key", "Azure API Key"),
            Field("azure_api_version", "Azure API Version"),
        ),
        make_client=_make_client,
        resolve_model=_resolve_model,
        incomplete_message="Azure OpenAI configuration is incomplete",
    )
)
