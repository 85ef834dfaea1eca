import dataclasses

import openai
import pytest

from giq.config import GiqConfig
from giq.errors import ConfigurationError, EmptyResultError, TransportError
from giq.generator import STATUS_MAX_TOKENS, generate_status_insight, generate_suggestions
from giq.providers import backend_choices, get_backend

from .conftest import ClientFactory, FakeCompletions, fake_completion

AZURE = GiqConfig(
    ai_provider="azure_openai",
    azure_endpoint="https://res.openai.azure.com/",
    azure_deployment_id="my-deployment",
    azure_api_key="az-key",
    azure_api_version="2024-02-01",
)


@pytest.fixture
def openai_client(monkeypatch):
    def _install(response=None, error=None):
        factory = ClientFactory(FakeCompletions(response, error))
        monkeypatch.setattr(openai, "OpenAI", factory)
        return factory

    return _install


@pytest.fixture
def azure_client(monkeypatch):
    def _install(response=None, error=None):
        factory = ClientFactory(FakeCompletions(response, error))
        monkeypatch.setattr(openai, "AzureOpenAI", factory)
        return factory

    return _install


def test_registry_order_and_lookup():
    assert [b.name for b in backend_choices()] == ["openai", "azure_openai"]
    assert get_backend("AZURE_OPENAI").name == "azure_openai"
    assert get_backend("").name == "openai"
    assert get_backend(None).name == "openai"
    assert get_backend("anthropic").name == "openai"


def test_openai_request_shape_and_trimmed_results(openai_client):
    factory = openai_client(fake_completion("  feat: add x \n", "fix: y", "\tdocs: z"))
    cfg = GiqConfig(ai_provider="openai", ai_key="sk-test")

    result = generate_suggestions(cfg, "PROMPT", count=3, max_tokens=64)

    assert result == ["feat: add x", "fix: y", "docs: z"]
    assert factory.kwargs == [{"api_key": "sk-test", "base_url": None}]
    (request,) = factory.completions.requests
    assert request == {
        "model": "gpt-3.5-turbo",
        "messages": [{"role": "user", "content": "PROMPT"}],
        "temperature": 0.5,
        "max_tokens": 64,
        "n": 3,
    }


def test_openai_model_and_base_url_come_from_config(openai_client):
    factory = openai_client(fake_completion("ok"))
    cfg = GiqConfig(ai_key="sk-test", ai_model="gpt-4o-mini", ai_base_url="http://localhost:8000/v1")

    generate_suggestions(cfg, "p", count=1, max_tokens=128)

    assert factory.kwargs[0]["base_url"] == "http://localhost:8000/v1"
    assert factory.completions.requests[0]["model"] == "gpt-4o-mini"
    assert factory.completions.requests[0]["n"] == 1


def test_fewer_completions_than_requested_is_success(openai_client):
    openai_client(fake_completion("only one"))
    assert generate_suggestions(GiqConfig(ai_key="k"), "p", count=3) == ["only one"]


def test_unknown_provider_routes_to_openai(openai_client):
    factory = openai_client(fake_completion("ok"))
    generate_suggestions(GiqConfig(ai_provider="something-else", ai_key="k"), "p")
    assert len(factory.kwargs) == 1


def test_missing_openai_key_fails_without_network(openai_client):
    factory = openai_client(fake_completion("never"))
    with pytest.raises(ConfigurationError, match="API key is not configured"):
        generate_suggestions(GiqConfig(ai_provider="openai", ai_key="  "), "p")
    assert factory.kwargs == []
    assert factory.completions.requests == []


@pytest.mark.parametrize(
    "missing",
    ["azure_endpoint", "azure_deployment_id", "azure_api_key", "azure_api_version"],
)
def test_any_missing_azure_field_fails_without_network(azure_client, missing):
    factory = azure_client(fake_completion("never"))
    cfg = dataclasses.replace(AZURE, **{missing: ""})
    with pytest.raises(ConfigurationError, match="Azure OpenAI configuration is incomplete") as excinfo:
        generate_suggestions(cfg, "p")
    assert missing in str(excinfo.value)
    assert factory.kwargs == []


def test_azure_maps_model_to_deployment(azure_client):
    factory = azure_client(fake_completion(" refactor: tidy "))

    result = generate_suggestions(AZURE, "PROMPT", count=3, max_tokens=64)

    assert result == ["refactor: tidy"]
    assert factory.kwargs == [
        {
            "api_key": "az-key",
            "azure_endpoint": "https://res.openai.azure.com/",
            "api_version": "2024-02-01",
        }
    ]
    request = factory.completions.requests[0]
    assert request["model"] == "my-deployment"
    assert request["temperature"] == 0.5
    assert request["n"] == 3


def test_backend_failure_is_transport_error(openai_client):
    openai_client(error=openai.OpenAIError("quota exceeded"))
    with pytest.raises(TransportError, match="OpenAI API error: quota exceeded"):
        generate_suggestions(GiqConfig(ai_key="k"), "p")


def test_zero_choices_is_empty_result(azure_client):
    azure_client(fake_completion())
    with pytest.raises(EmptyResultError, match="no completions returned from Azure OpenAI"):
        generate_suggestions(AZURE, "p")


def test_blank_choices_are_dropped_and_all_blank_is_empty(openai_client):
    openai_client(fake_completion("   ", None, "feat: keep"))
    assert generate_suggestions(GiqConfig(ai_key="k"), "p") == ["feat: keep"]

    openai_client(fake_completion("  ", None))
    with pytest.raises(EmptyResultError):
        generate_suggestions(GiqConfig(ai_key="k"), "p")


def test_status_insight_asks_for_one_trimmed_line(openai_client, openai_config):
    factory = openai_client(fake_completion("  app.py: adds retry logic.\n"))

    insight = generate_status_insight(openai_config, "diff --git a/app.py b/app.py\n+retry()")

    assert insight == "app.py: adds retry logic."
    (request,) = factory.completions.requests
    assert request["n"] == 1
    assert request["max_tokens"] == STATUS_MAX_TOKENS
    assert "+retry()" in request["messages"][0]["content"]
