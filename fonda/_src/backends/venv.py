import logging
from pathlib import Path
from typing import Optional

from fonda._src.backends.base import Backend, CommandResult, CommandRunner
from fonda._src.constants import PlatformTag
from fonda._src.utils import environment_python


logger = logging.getLogger(__name__)


class VenvBackend(Backend):
    """Creates environments with `python -m venv` and installs with pip"""

    def __init__(self, runner: CommandRunner, platform: PlatformTag, python: str = "python"):
        super().__init__(runner, platform)
        self.python = python

    @property
    def name(self) -> str:
        return "venv"

    def create_environment(self, name: str, python_version: Optional[str] = None) -> CommandResult:
        if python_version:
            logger.warning(
                "venv cannot pin python versions, ignoring `%s` and using %s",
                python_version, self.python,
            )
        return self.runner.run([self.python, "-m", "venv", name])

    def install(self, name: str, requirements_file: str | Path) -> CommandResult:
        return self.runner.run([
            str(environment_python(name, self.platform)), "-m", "pip", "install",
            "-r", str(requirements_file),
        ])
