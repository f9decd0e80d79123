import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel

from fonda._src.constants import PlatformTag
from fonda._src.exceptions import NonZeroExit, ToolNotFound


logger = logging.getLogger(__name__)


class CommandResult(BaseModel):
    command: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def check(self) -> "CommandResult":
        """Raise NonZeroExit if the command failed, otherwise return self"""
        if not self.ok:
            raise NonZeroExit(self.command, self.returncode, self.stdout, self.stderr)
        return self


class CommandRunner:
    """Runs external commands to completion and captures their output"""

    def __init__(self, cwd: Optional[str | Path] = None):
        self.cwd = cwd

    def run(self, command: List[str]) -> CommandResult:
        logger.debug("running: %s (cwd=%s)", " ".join(command), self.cwd or ".")
        try:
            completed = subprocess.run(
                command,
                cwd=self.cwd,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as err:
            raise ToolNotFound(command[0]) from err

        return CommandResult(
            command=command,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )


class Backend(ABC):
    """Creates an environment and installs a requirements file into it"""

    def __init__(self, runner: CommandRunner, platform: PlatformTag):
        self.runner = runner
        self.platform = platform

    @property
    @abstractmethod
    def name(self) -> str:
        """Short name used in log messages"""

    @abstractmethod
    def create_environment(self, name: str, python_version: Optional[str] = None) -> CommandResult:
        """Create an environment in the directory `name`"""

    @abstractmethod
    def install(self, name: str, requirements_file: str | Path) -> CommandResult:
        """Install `requirements_file` into the environment `name`"""
