from pathlib import Path

from fonda._src.constants import PlatformTag


def environment_python(name: str | Path, platform: PlatformTag) -> Path:
    """Path of the interpreter inside the environment directory `name`"""
    if platform == PlatformTag.WINDOWS:
        return Path(name) / "Scripts" / "python.exe"
    return Path(name) / "bin" / "python"


def activation_command(name: str | Path, platform: PlatformTag) -> str:
    """The command a user runs to activate the environment `name`"""
    if platform == PlatformTag.WINDOWS:
        return f"{name}\\Scripts\\activate.bat"
    return f"source {name}/bin/activate"
