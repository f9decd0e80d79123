from enum import Enum


DEFAULT_ENVIRONMENT_FILE = "environment.yaml"
DEFAULT_REQUIREMENTS_FILE = "requirements.txt"
DEFAULT_FAST_TOOL = "uv"

EDITABLE_FLAGS = ("-e", "--editable")
GIT_PREFIX = "git+"
URL_SCHEMES = ("http://", "https://")
COMPACT_PIP_PREFIX = "pip:"
# a compact `pip:` segment starting with one of these continues the previous constraint
VERSION_OPERATOR_CHARS = "<>=!~"


class PlatformTag(str, Enum):
    WINDOWS = "windows"
    LINUX = "linux"
    MACOS = "macos"
    ANY = "any"


class Section(str, Enum):
    CONDA = "conda"
    PIP = "pip"


# tags accepted inside a `# [tag]` marker
MARKER_TAGS = {
    "win": PlatformTag.WINDOWS,
    "linux": PlatformTag.LINUX,
    "osx": PlatformTag.MACOS,
    "darwin": PlatformTag.MACOS,
    "macos": PlatformTag.MACOS,
}

# prefixes of rattler platform strings, eg. 'linux-64', 'osx-arm64', 'win-64'
RATTLER_PLATFORM_PREFIXES = {
    "win-": PlatformTag.WINDOWS,
    "linux-": PlatformTag.LINUX,
    "osx-": PlatformTag.MACOS,
}
