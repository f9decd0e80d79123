from pathlib import Path
from typing import Optional

from fonda._src.backends.base import Backend, CommandResult, CommandRunner
from fonda._src.constants import DEFAULT_FAST_TOOL, PlatformTag
from fonda._src.utils import environment_python


class UvBackend(Backend):
    """Creates environments with `uv venv` and installs with `uv pip`"""

    def __init__(self, runner: CommandRunner, platform: PlatformTag, executable: str = DEFAULT_FAST_TOOL):
        super().__init__(runner, platform)
        self.executable = executable

    @property
    def name(self) -> str:
        return self.executable

    def create_environment(self, name: str, python_version: Optional[str] = None) -> CommandResult:
        command = [self.executable, "venv", name]
        if python_version:
            # uv understands version requests such as `3.11` or `>=3.8`
            command += ["--python", python_version]
        return self.runner.run(command)

    def install(self, name: str, requirements_file: str | Path) -> CommandResult:
        return self.runner.run([
            self.executable, "pip", "install",
            "--python", str(environment_python(name, self.platform)),
            "-r", str(requirements_file),
        ])
