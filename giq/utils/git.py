from __future__ import annotations

import logging
import shutil
import subprocess
from typing import Optional

from git import Repo  # type: ignore
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError  # type: ignore

from ..errors import TransportError, ValidationError

LOG = logging.getLogger(__name__)


class Git:
    """The system git executable.

    ``run`` hands the terminal to git (inherited stdin/stdout/stderr) and
    returns its exit status. Captured queries go through GitPython.
    """

    def __init__(self, executable: str, cwd: Optional[str] = None) -> None:
        self.executable = executable
        self.cwd = cwd
        self._repo: Optional[Repo] = None
        self._looked_up = False

    @classmethod
    def locate(cls, cwd: Optional[str] = None) -> "Git":
        path = shutil.which("git")
        if not path:
            raise TransportError("git not found in PATH")
        return cls(path, cwd=cwd)

    @property
    def repo(self) -> Optional[Repo]:
        if not self._looked_up:
            self._repo = _ensure_repo(self.cwd)
            self._looked_up = True
        return self._repo

    def in_repository(self) -> bool:
        return self.repo is not None

    def run(self, *args: str) -> int:
        cmd = [self.executable, *args]
        LOG.debug("Running: %s", " ".join(cmd))
        try:
            res = subprocess.run(cmd, cwd=self.cwd)
        except OSError as exc:
            raise TransportError(f"failed to execute git: {exc}") from exc
        return res.returncode

    def commit(self, message: str) -> int:
        return self.run("commit", "-m", message)

    def _query(self, command: str, *args: str) -> str:
        repo = self.repo
        if repo is None:
            raise ValidationError("not a git repository")
        LOG.debug("Querying: git %s %s", command, " ".join(args))
        try:
            return getattr(repo.git, command)(*args)
        except GitCommandError as exc:
            detail = (exc.stderr or "").strip() or str(exc)
            raise TransportError(f"git {command} failed: {detail}") from exc

    def staged_diff(self) -> str:
        return self._query("diff", "--cached")

    def staged_files(self) -> str:
        return self._query("diff", "--cached", "--name-only")

    def status(self) -> str:
        return self._query("status")


def _ensure_repo(cwd: Optional[str] = None) -> Optional[Repo]:
    try:
        return Repo(cwd or ".", search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError):
        return None
