from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Tuple

import openai

from ..errors import ConfigurationError, EmptyResultError, TransportError

if TYPE_CHECKING:  # pragma: no cover
    from ..config import GiqConfig

LOG = logging.getLogger(__name__)

DEFAULT_PROVIDER = "openai"
TEMPERATURE = 0.5


@dataclass(frozen=True)
class Field:
    """A required config key and the label the setup wizard asks for."""

    key: str
    label: str


@dataclass(frozen=True)
class Backend:
    """Strategy record for one AI provider.

    ``fields`` is ordered: the setup wizard asks for them in this order.
    ``make_client`` returns an object exposing ``chat.completions.create``.
    """

    name: str
    title: str
    fields: Tuple[Field, ...]
    make_client: Callable[["GiqConfig"], Any]
    resolve_model: Callable[["GiqConfig"], str]
    incomplete_message: str

    def missing(self, cfg: "GiqConfig") -> List[str]:
        return [f.key for f in self.fields if not (getattr(cfg, f.key, "") or "").strip()]

    def check(self, cfg: "GiqConfig") -> None:
        missing = self.missing(cfg)
        if missing:
            raise ConfigurationError(f"{self.incomplete_message} (missing: {', '.join(missing)})")

    def build_request(self, cfg: "GiqConfig", prompt: str, count: int, max_tokens: int) -> Dict[str, Any]:
        return {
            "model": self.resolve_model(cfg),
            "messages": [{"role": "user", "content": prompt}],
            "temperature": TEMPERATURE,
            "max_tokens": max_tokens,
            "n": count,
        }

    def parse_response(self, resp: Any) -> List[str]:
        suggestions: List[str] = []
        for choice in getattr(resp, "choices", None) or []:
            content = (choice.message.content or "").strip()
            if content:
                suggestions.append(content)
        if not suggestions:
            raise EmptyResultError(f"no completions returned from {self.title}")
        return suggestions

    def complete(self, cfg: "GiqConfig", prompt: str, count: int, max_tokens: int) -> List[str]:
        self.check(cfg)
        request = self.build_request(cfg, prompt, count, max_tokens)
        client = self.make_client(cfg)
        LOG.debug("Requesting %d completion(s) from %s (model=%s)", count, self.title, request["model"])
        try:
            resp = client.chat.completions.create(**request)
        except openai.OpenAIError as exc:
            raise TransportError(f"{self.title} API error: {exc}") from exc
        suggestions = self.parse_response(resp)
        LOG.debug("%s returned %d suggestion(s)", self.title, len(suggestions))
        return suggestions


BACKENDS: Dict[str, Backend] = {}


def register(backend: Backend) -> Backend:
    BACKENDS[backend.name] = backend
    return backend


def get_backend(name: str | None) -> Backend:
    """Look up a backend by provider name; unknown or empty names get the default."""
    key = (name or "").strip().lower()
    backend = BACKENDS.get(key)
    if backend is None:
        if key and key != DEFAULT_PROVIDER:
            LOG.debug("Unknown provider %r, using %s", name, DEFAULT_PROVIDER)
        backend = BACKENDS[DEFAULT_PROVIDER]
    return backend


def backend_choices() -> List[Backend]:
    """Backends in registration order, as numbered in the setup wizard."""
    return list(BACKENDS.values())
