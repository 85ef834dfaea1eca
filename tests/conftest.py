from __future__ import annotations

from contextlib import contextmanager
from types import SimpleNamespace
from typing import Iterable, List, Optional

import pytest

from giq.app import App
from giq.config import GiqConfig


class ScriptedTerminal:
    """Terminal double that replays keys and records every drawn frame."""

    def __init__(self, keys: Iterable[str] = (), lines: Iterable[str] = ()) -> None:
        self.keys = list(keys)
        self.lines = list(lines)
        self.frames: List[str] = []
        self.prompts: List[str] = []
        self.sessions = 0

    @contextmanager
    def session(self):
        self.sessions += 1
        yield self

    def read_key(self) -> str:
        if not self.keys:
            raise EOFError
        return self.keys.pop(0)

    def draw(self, text: str) -> None:
        self.frames.append(text)

    def read_line(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.lines.pop(0)


class FakeGit:
    def __init__(
        self,
        files: str = "",
        diff: str = "",
        status_text: str = "",
        in_repo: bool = True,
        returncode: int = 0,
    ) -> None:
        self.files = files
        self.diff = diff
        self.status_text = status_text
        self.in_repo = in_repo
        self.returncode = returncode
        self.calls: List[List[str]] = []
        self.queries: List[str] = []

    def in_repository(self) -> bool:
        return self.in_repo

    def run(self, *args: str) -> int:
        self.calls.append(list(args))
        return self.returncode

    def commit(self, message: str) -> int:
        return self.run("commit", "-m", message)

    def staged_files(self) -> str:
        self.queries.append("files")
        return self.files

    def staged_diff(self) -> str:
        self.queries.append("diff")
        return self.diff

    def status(self) -> str:
        self.queries.append("status")
        return self.status_text


class FakeGenerate:
    def __init__(self, result: Optional[List[str]] = None, error: Optional[Exception] = None) -> None:
        self.result = result or []
        self.error = error
        self.calls: List[dict] = []

    def __call__(self, cfg, prompt, count, max_tokens):
        self.calls.append({"cfg": cfg, "prompt": prompt, "count": count, "max_tokens": max_tokens})
        if self.error is not None:
            raise self.error
        return list(self.result)


def fake_completion(*contents: Optional[str]) -> SimpleNamespace:
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=c)) for c in contents]
    )


class FakeCompletions:
    def __init__(self, response=None, error: Optional[Exception] = None) -> None:
        self.response = response
        self.error = error
        self.requests: List[dict] = []

    def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


class ClientFactory:
    """Stands in for openai.OpenAI / openai.AzureOpenAI and records constructor kwargs."""

    def __init__(self, completions: FakeCompletions) -> None:
        self.completions = completions
        self.kwargs: List[dict] = []

    def __call__(self, **kwargs):
        self.kwargs.append(kwargs)
        return SimpleNamespace(chat=SimpleNamespace(completions=self.completions))


@pytest.fixture
def openai_config() -> GiqConfig:
    return GiqConfig(ai_provider="openai", ai_key="sk-test")


@pytest.fixture
def make_app(tmp_path, openai_config):
    def _make(git=None, terminal=None, generate=None, config=None) -> App:
        return App(
            config=config or openai_config,
            git=git or FakeGit(),
            terminal=terminal or ScriptedTerminal(),
            generate=generate or FakeGenerate(["feat: something"]),
            config_path=tmp_path / "home" / ".config" / "giq" / "config.yaml",
        )

    return _make
