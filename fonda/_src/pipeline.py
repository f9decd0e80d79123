import logging
from typing import Optional, Tuple

from fonda._src.backends import CommandResult, CommandRunner, UvBackend, VenvBackend
from fonda._src.config import FondaConfig
from fonda._src.constants import PlatformTag
from fonda._src.exceptions import RequirementsFileError
from fonda._src.loader import load_environment_file
from fonda._src.manifest import write_manifest
from fonda._src.models.environment import EnvironmentSpec, ResolvedManifest
from fonda._src.orchestrator import EnvironmentOrchestrator, OrchestrationResult
from fonda._src.platform import current_platform
from fonda._src.resolve import resolve


logger = logging.getLogger(__name__)


def target_platform(config: FondaConfig) -> PlatformTag:
    if config.platform is not None:
        return config.platform
    return current_platform()


def resolve_environment(config: FondaConfig) -> Tuple[EnvironmentSpec, ResolvedManifest]:
    env = load_environment_file(config.environment_file)
    manifest = resolve(env, target_platform(config))
    return env, manifest


def write_requirements(config: FondaConfig) -> ResolvedManifest:
    """Resolve the environment file and write the requirements file only"""
    _, manifest = resolve_environment(config)
    write_manifest(manifest, config.requirements_file)
    return manifest


def create_environment(config: FondaConfig, runner: Optional[CommandRunner] = None) -> OrchestrationResult:
    """Resolve the environment file, create the environment and install into it"""
    # the environment is built on this machine, so any platform override is ignored
    host = current_platform()
    if config.platform is not None and config.platform != host:
        logger.warning("ignoring platform %s, creating the environment for %s", config.platform.value, host.value)
    env = load_environment_file(config.environment_file)
    manifest = resolve(env, host)
    runner = runner or CommandRunner()

    orchestrator = EnvironmentOrchestrator(
        env=env,
        manifest=manifest,
        fast=UvBackend(runner, host, executable=config.fast_tool),
        standard=VenvBackend(runner, host, python=config.python),
        requirements_file=config.requirements_file,
    )
    return orchestrator.run()


def install_requirements(config: FondaConfig, runner: Optional[CommandRunner] = None) -> CommandResult:
    """Install an existing requirements file into the configured interpreter with pip"""
    if not config.requirements_file.exists():
        raise RequirementsFileError(config.requirements_file)

    runner = runner or CommandRunner()
    logger.info("installing %s with %s", config.requirements_file, config.python)
    return runner.run(
        [config.python, "-m", "pip", "install", "-r", str(config.requirements_file)]
    ).check()
