# Backends know how to create an isolated interpreter environment and
# install a requirements file into it. Two are provided:
#
#   - UvBackend, the fast tool, which is tried first
#   - VenvBackend, `python -m venv` + pip, the standard fallback
#
# Both only build command lines, running them is left to a CommandRunner
# so tests can swap in a fake one.
from fonda._src.backends.base import Backend, CommandResult, CommandRunner
from fonda._src.backends.uv import UvBackend
from fonda._src.backends.venv import VenvBackend

__all__ = [
    "Backend",
    "CommandResult",
    "CommandRunner",
    "UvBackend",
    "VenvBackend",
]
