"""Environment creation state machine.

    start -> creating_fast -> env_ready -> installing -> done
                   |              ^             |
                   v              |             v
           creating_standard -----+       install_failed
                   |
                   v
                 failed

The fast backend is tried once; a missing binary or a non-zero exit falls
back to the standard backend. Whichever backend created the environment
also installs into it. Nothing is retried and no state is visited twice.
"""
import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional

from fonda._src.backends.base import Backend
from fonda._src.exceptions import ExternalToolError
from fonda._src.manifest import write_manifest
from fonda._src.models.environment import EnvironmentSpec, ResolvedManifest


logger = logging.getLogger(__name__)


class State(str, Enum):
    START = "start"
    CREATING_FAST = "creating_fast"
    CREATING_STANDARD = "creating_standard"
    ENV_READY = "env_ready"
    INSTALLING = "installing"
    DONE = "done"
    FAILED = "failed"
    INSTALL_FAILED = "install_failed"


TERMINAL_STATES = frozenset({State.DONE, State.FAILED, State.INSTALL_FAILED})


class OrchestrationResult:
    def __init__(
        self,
        name: str,
        state: State,
        history: List[State],
        backend: Optional[Backend],
        error: Optional[ExternalToolError],
    ):
        self.name = name
        self.state = state
        self.history = history
        self.backend = backend
        self.error = error

    @property
    def ok(self) -> bool:
        return self.state == State.DONE


class EnvironmentOrchestrator:
    def __init__(
        self,
        env: EnvironmentSpec,
        manifest: ResolvedManifest,
        fast: Backend,
        standard: Backend,
        requirements_file: str | Path,
    ):
        """Creates the environment described by `env` and installs `manifest` into it.

        Parameters
        ----------
        env: EnvironmentSpec
            Provides the environment name and the requested python version
        manifest: ResolvedManifest
            The resolved dependencies to install
        fast: Backend
            Backend tried first
        standard: Backend
            Backend used when the fast one is missing or fails
        requirements_file: str | Path
            Where the rendered manifest is written for the installer
        """
        self.env = env
        self.manifest = manifest
        self.fast = fast
        self.standard = standard
        self.requirements_file = Path(requirements_file)

        self.state = State.START
        self.history = [State.START]
        self.backend: Optional[Backend] = None
        self.error: Optional[ExternalToolError] = None

        self._transitions: Dict[State, Callable[[], State]] = {
            State.START: self._start,
            State.CREATING_FAST: self._create_fast,
            State.CREATING_STANDARD: self._create_standard,
            State.ENV_READY: self._env_ready,
            State.INSTALLING: self._install,
        }

    def step(self) -> State:
        """Run the action of the current state and move to the next one"""
        if self.state in TERMINAL_STATES:
            raise RuntimeError(f"orchestrator already finished in state `{self.state.value}`")

        next_state = self._transitions[self.state]()
        if next_state in self.history:
            raise RuntimeError(f"state `{next_state.value}` visited twice")

        logger.debug("%s -> %s", self.state.value, next_state.value)
        self.state = next_state
        self.history.append(next_state)
        return next_state

    def run(self) -> OrchestrationResult:
        while self.state not in TERMINAL_STATES:
            self.step()
        return OrchestrationResult(
            name=self.env.name,
            state=self.state,
            history=list(self.history),
            backend=self.backend,
            error=self.error,
        )

    def _start(self) -> State:
        return State.CREATING_FAST

    def _create_fast(self) -> State:
        try:
            self.fast.create_environment(self.env.name, self.env.python_version).check()
        except ExternalToolError as err:
            logger.warning(
                "%s could not create the environment, falling back to %s",
                self.fast.name, self.standard.name,
            )
            logger.debug(err.msg)
            return State.CREATING_STANDARD

        logger.info("environment `%s` created with %s", self.env.name, self.fast.name)
        self.backend = self.fast
        return State.ENV_READY

    def _create_standard(self) -> State:
        try:
            self.standard.create_environment(self.env.name, self.env.python_version).check()
        except ExternalToolError as err:
            self.error = err
            logger.error("failed to create environment `%s` with %s", self.env.name, self.standard.name)
            return State.FAILED

        logger.info("environment `%s` created with %s", self.env.name, self.standard.name)
        self.backend = self.standard
        return State.ENV_READY

    def _env_ready(self) -> State:
        write_manifest(self.manifest, self.requirements_file)
        return State.INSTALLING

    def _install(self) -> State:
        if not self.manifest.entries:
            logger.info("no requirements to install for %s", self.manifest.platform.value)
            return State.DONE

        try:
            self.backend.install(self.env.name, self.requirements_file).check()
        except ExternalToolError as err:
            self.error = err
            logger.error("failed to install requirements with %s", self.backend.name)
            return State.INSTALL_FAILED

        logger.info("installed %d requirements with %s", len(self.manifest.entries), self.backend.name)
        return State.DONE
