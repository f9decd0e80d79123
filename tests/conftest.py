"""
Shared test fixtures: sample environment files and a fake command runner.
"""

import textwrap
from pathlib import Path

import pytest

from tests.fakes import FakeRunner


PLATFORM_ENVIRONMENT = """\
name: platform-test
python_version: ">=3.8"

dependencies:
  # Core dependencies for all platforms
  - pyyaml>=6.0        # For protocol parsing
  - numpy>=1.24.0      # For numerical operations and distributions
  - pandas>=1.3.0      # For data handling and analysis

  # Platform-specific dependencies
  - pywin32>=300       # [win]
  - pyobjc>=8.0        # [macos]
  - python-xlib>=0.30  # [linux]

# Platform-specific pip packages
pip:
  # Core pip packages for all platforms
  - requests>=2.28.0

  # Platform-specific pip packages
  - winreg>=0.3.1      # [win]
  - pyobjc-framework-Cocoa>=8.0  # [macos]
  - dbus-python>=1.2.18  # [linux]
"""

GIT_EDITABLE_ENVIRONMENT = """\
name: git-editable-test
python_version: ">=3.8"

dependencies:
  - pyyaml>=6.0        # For protocol parsing
  - numpy>=1.24.0

pip:
  - requests>=2.28.0   # For HTTP requests
  - git+https://github.com/user/repo.git                     # Basic Git repo
  - git+https://github.com/user/repo.git@v1.0.0              # Git repo with tag
  - git+ssh://git@github.com/user/private-repo.git           # SSH Git repo
  - https://example.com/packages/some-package.tar.gz         # Direct URL to package
  - -e .                                                     # Current directory
  - -e ./path/to/local/package                               # Local path
  - -e git+https://github.com/user/dev-repo.git              # Editable Git repo
"""


def write_environment(directory: Path, content: str, name: str = "environment.yaml") -> Path:
    path = directory / name
    path.write_text(textwrap.dedent(content))
    return path


@pytest.fixture
def platform_env_file(tmp_path: Path) -> Path:
    return write_environment(tmp_path, PLATFORM_ENVIRONMENT)


@pytest.fixture
def git_env_file(tmp_path: Path) -> Path:
    return write_environment(tmp_path, GIT_EDITABLE_ENVIRONMENT)


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()
