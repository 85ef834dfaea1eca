from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from .config import GiqConfig, user_config_path
from .generator import generate_suggestions
from .terminal import Terminal
from .utils.git import Git

Generate = Callable[..., List[str]]


@dataclass(frozen=True)
class App:
    """Collaborators shared by the enhanced commands for one invocation."""

    config: GiqConfig
    git: Git
    terminal: Terminal
    generate: Generate = generate_suggestions
    config_path: Optional[Path] = None

    @classmethod
    def create(cls, load_config: bool = True) -> "App":
        config = GiqConfig.load() if load_config else GiqConfig()
        return cls(config=config, git=Git.locate(), terminal=Terminal())

    @property
    def setup_path(self) -> Path:
        return self.config_path or user_config_path()
