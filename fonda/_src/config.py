import sys
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from fonda._src.constants import (
    DEFAULT_ENVIRONMENT_FILE,
    DEFAULT_FAST_TOOL,
    DEFAULT_REQUIREMENTS_FILE,
    PlatformTag,
)


class FondaConfig(BaseModel):
    """Settings for a single fonda run

    Built once by the cli and handed to every step that needs it, nothing
    reads global flags.
    """
    environment_file: Path = Path(DEFAULT_ENVIRONMENT_FILE)
    requirements_file: Path = Path(DEFAULT_REQUIREMENTS_FILE)
    # the fast tool, tried first to create the environment
    fast_tool: str = DEFAULT_FAST_TOOL
    # interpreter used by the standard `python -m venv` fallback
    python: str = sys.executable or "python"
    # resolve for this platform instead of the host's
    platform: Optional[PlatformTag] = None
    verbose: bool = False
