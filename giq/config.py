from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from .errors import ConfigurationError, GiqError
from .providers.base import DEFAULT_PROVIDER, get_backend

LOG = logging.getLogger(__name__)

ENV_PREFIX = "GIQ_"
CONFIG_FILENAME = "config.yaml"

DEFAULT_TEMPLATE = """\
# giq configuration file
#
# This file configures the AI provider for giq.
#
# ai_provider: Specify the AI provider to use. Options include:
#    - openai (default)
#    - azure_openai
#
# For OpenAI, configure the following:
#   ai_key: Your API key for OpenAI.
#   ai_model: Optional model id (defaults to gpt-3.5-turbo).
#   ai_base_url: Optional OpenAI-compatible base URL.
#
# For Azure OpenAI, configure the following:
#   azure_endpoint: The endpoint for your Azure OpenAI resource
#                   (e.g., https://your-resource-name.openai.azure.com/)
#   azure_deployment_id: The deployment ID for the OpenAI model.
#   azure_api_key: Your API key for Azure OpenAI.
#   azure_api_version: The API version for Azure OpenAI (e.g., 2024-02-01).
#
# Every key can be overridden with an environment variable prefixed with
# GIQ_, for example GIQ_AI_KEY or GIQ_AZURE_ENDPOINT.
#
# Example configuration for OpenAI:
#
#   ai_provider: openai
#   ai_key: your-openai-api-key
#
# Example configuration for Azure OpenAI:
#
#   ai_provider: azure_openai
#   azure_endpoint: https://your-resource-name.openai.azure.com/
#   azure_deployment_id: your-deployment-id
#   azure_api_key: your-azure-api-key
#   azure_api_version: 2024-02-01
#
"""


def user_config_path(home: Optional[Path] = None) -> Path:
    """Location used by `giq setup` and for the default template."""
    home = home or Path.home()
    return home / ".config" / "giq" / CONFIG_FILENAME


def default_config_locations(cwd: Optional[Path] = None, home: Optional[Path] = None) -> List[Path]:
    cwd = cwd or Path.cwd()
    home = home or Path.home()
    return [
        cwd / CONFIG_FILENAME,
        user_config_path(home),
        home / ".giq" / CONFIG_FILENAME,
    ]


@dataclass(frozen=True)
class GiqConfig:
    ai_provider: str = DEFAULT_PROVIDER
    ai_key: str = ""
    azure_endpoint: str = ""
    azure_deployment_id: str = ""
    azure_api_key: str = ""
    azure_api_version: str = ""
    # Optional: empty means the backend default
    ai_model: str = ""
    ai_base_url: str = ""

    @classmethod
    def keys(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "GiqConfig":
        values: Dict[str, str] = {}
        for key in cls.keys():
            raw = data.get(key)
            if raw is None:
                continue
            # YAML turns bare dates and numbers (api versions) into non-strings
            values[key] = str(raw).strip()
        if not values.get("ai_provider"):
            values["ai_provider"] = DEFAULT_PROVIDER
        return cls(**values)

    @classmethod
    def load(
        cls,
        overrides: Optional[Mapping[str, Any]] = None,
        *,
        cwd: Optional[Path] = None,
        home: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "GiqConfig":
        """Read the first config file found, then apply GIQ_* env vars and overrides."""
        environ = os.environ if environ is None else environ
        data: Dict[str, Any] = {}

        path = _find_config(default_config_locations(cwd, home))
        if path is None:
            _write_default_template(user_config_path(home))
        else:
            LOG.debug("Loading configuration from %s", path)
            data.update(_read_yaml(path))

        for key in cls.keys():
            env_value = environ.get(ENV_PREFIX + key.upper())
            if env_value:
                data[key] = env_value
        if overrides:
            data.update({k: v for k, v in overrides.items() if v is not None})
        return cls.from_mapping(data)

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def _find_config(candidates: List[Path]) -> Optional[Path]:
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"invalid YAML in {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigurationError(f"cannot read {path}: {exc}") from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{path} must contain a mapping of settings")
    return raw


def _write_default_template(path: Path) -> None:
    # Best effort: a read-only home must not prevent giq from starting
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(DEFAULT_TEMPLATE, encoding="utf-8")
    except OSError as exc:
        LOG.info("Could not write default configuration to %s: %s", path, exc)
        return
    LOG.info("Wrote default configuration template to %s", path)


def save_config(cfg: GiqConfig, path: Optional[Path] = None) -> Path:
    """Persist the keys relevant to the active provider and return the path written."""
    path = path or user_config_path()
    backend = get_backend(cfg.ai_provider)
    values = cfg.to_dict()

    data: Dict[str, str] = {"ai_provider": backend.name}
    for field in backend.fields:
        data[field.key] = values[field.key]
    for optional in ("ai_model", "ai_base_url"):
        if values[optional]:
            data[optional] = values[optional]

    content = "# giq configuration file\n" + yaml.safe_dump(data, sort_keys=False, default_flow_style=False)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        os.chmod(path, 0o600)
    except OSError as exc:
        raise GiqError(f"could not write configuration to {path}: {exc}") from exc
    LOG.debug("Saved configuration to %s", path)
    return path
