from typing import List, Optional


class FondaError(Exception):
    def __init__(self, msg: str):
        self.msg = msg
        super().__init__(self.msg)


class ClassificationError(FondaError):
    """A dependency line could not be classified"""
    reason = "invalid dependency"

    def __init__(self, raw_line: str, detail: Optional[str] = None):
        self.raw_line = raw_line
        self.detail = detail
        msg = f"{self.reason}: `{raw_line}`"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)


class UnknownPlatformMarker(ClassificationError):
    reason = "unknown platform marker"


class MalformedGitRef(ClassificationError):
    reason = "malformed git reference"


class EmptySpec(ClassificationError):
    reason = "empty dependency spec"


class DuplicateEditableFlag(ClassificationError):
    reason = "editable flag given more than once"


class UnsupportedPlatformError(FondaError):
    def __init__(self, platform: str):
        self.platform = platform
        super().__init__(
            f"Unsupported platform `{platform}`!"
            f"\nfonda can only build environments on windows, linux and macos"
        )


class ExternalToolError(FondaError):
    pass


class ToolNotFound(ExternalToolError):
    def __init__(self, tool: str):
        self.tool = tool
        super().__init__(f"`{tool}` was not found on this system")


class NonZeroExit(ExternalToolError):
    def __init__(self, command: List[str], returncode: int, stdout: str = "", stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        msg = (
            f"Command failed with exit status {returncode}!"
            f"\nRan command: `{' '.join(command)}`"
        )
        output = stderr.strip() or stdout.strip()
        if output:
            msg += f"\nOutput:\n{output}"
        super().__init__(msg)


class EnvironmentFileError(FondaError):
    def __init__(self, path, err):
        self.path = path
        super().__init__(
            f"Failed to load environment file!"
            f"\nPath: `{path}`"
            f"\nError message: {err}"
        )


class RequirementsFileError(FondaError):
    def __init__(self, path):
        self.path = path
        super().__init__(f"requirements file `{path}` not found")
