"""
Tests for the environment creation state machine, driven by fake backends.
"""

from pathlib import Path

import pytest

from fonda._src.constants import PlatformTag
from fonda._src.exceptions import NonZeroExit, ToolNotFound
from fonda._src.models.environment import EnvironmentSpec, ResolvedManifest
from fonda._src.orchestrator import EnvironmentOrchestrator, State
from tests.fakes import FakeBackend


@pytest.fixture
def env() -> EnvironmentSpec:
    return EnvironmentSpec(name="my-env", python_version=">=3.8", dependencies=["numpy"])


@pytest.fixture
def manifest() -> ResolvedManifest:
    return ResolvedManifest(name="my-env", platform=PlatformTag.LINUX, entries=["numpy", "-e ."])


def make_orchestrator(env, manifest, tmp_path: Path, fast: FakeBackend, standard: FakeBackend):
    return EnvironmentOrchestrator(
        env=env,
        manifest=manifest,
        fast=fast,
        standard=standard,
        requirements_file=tmp_path / "requirements.txt",
    )


class TestFastPath:
    def test_fast_tool_creates_and_installs(self, env, manifest, tmp_path: Path) -> None:
        fast, standard = FakeBackend("uv"), FakeBackend("venv")
        result = make_orchestrator(env, manifest, tmp_path, fast, standard).run()

        assert result.state == State.DONE
        assert result.ok
        assert result.backend is fast
        assert result.error is None
        assert result.name == "my-env"
        assert result.history == [
            State.START, State.CREATING_FAST, State.ENV_READY, State.INSTALLING, State.DONE,
        ]
        assert fast.calls == [
            ("create", "my-env", ">=3.8"),
            ("install", "my-env", str(tmp_path / "requirements.txt")),
        ]
        assert standard.calls == []

    def test_rendered_manifest_is_the_install_source(self, env, manifest, tmp_path: Path) -> None:
        make_orchestrator(env, manifest, tmp_path, FakeBackend("uv"), FakeBackend("venv")).run()
        assert (tmp_path / "requirements.txt").read_text() == "numpy\n-e .\n"


class TestFallback:
    @pytest.mark.parametrize("fast_outcome", ["missing", 2])
    def test_falls_back_to_standard_tool(self, env, manifest, tmp_path: Path, fast_outcome) -> None:
        fast = FakeBackend("uv", create=fast_outcome)
        standard = FakeBackend("venv")
        result = make_orchestrator(env, manifest, tmp_path, fast, standard).run()

        assert result.state == State.DONE
        assert result.backend is standard
        assert result.history == [
            State.START, State.CREATING_FAST, State.CREATING_STANDARD,
            State.ENV_READY, State.INSTALLING, State.DONE,
        ]
        # exactly two creation attempts and one install, with the standard tool
        assert fast.calls == [("create", "my-env", ">=3.8")]
        assert standard.calls == [
            ("create", "my-env", ">=3.8"),
            ("install", "my-env", str(tmp_path / "requirements.txt")),
        ]

    @pytest.mark.parametrize("standard_outcome", ["missing", 1])
    def test_both_tools_fail(self, env, manifest, tmp_path: Path, standard_outcome) -> None:
        fast = FakeBackend("uv", create="missing")
        standard = FakeBackend("venv", create=standard_outcome)
        result = make_orchestrator(env, manifest, tmp_path, fast, standard).run()

        assert result.state == State.FAILED
        assert not result.ok
        assert result.backend is None
        assert result.history == [
            State.START, State.CREATING_FAST, State.CREATING_STANDARD, State.FAILED,
        ]
        assert [call[0] for call in fast.calls + standard.calls] == ["create", "create"]
        assert not (tmp_path / "requirements.txt").exists()

    def test_failure_carries_the_command_output(self, env, manifest, tmp_path: Path) -> None:
        fast = FakeBackend("uv", create=1)
        standard = FakeBackend("venv", create=1)
        result = make_orchestrator(env, manifest, tmp_path, fast, standard).run()

        assert isinstance(result.error, NonZeroExit)
        assert result.error.returncode == 1
        assert "failed" in result.error.msg

    def test_missing_standard_tool(self, env, manifest, tmp_path: Path) -> None:
        fast = FakeBackend("uv", create=1)
        standard = FakeBackend("venv", create="missing")
        result = make_orchestrator(env, manifest, tmp_path, fast, standard).run()
        assert isinstance(result.error, ToolNotFound)


class TestInstall:
    def test_install_failure_is_not_retried(self, env, manifest, tmp_path: Path) -> None:
        fast = FakeBackend("uv", install=1)
        standard = FakeBackend("venv")
        result = make_orchestrator(env, manifest, tmp_path, fast, standard).run()

        assert result.state == State.INSTALL_FAILED
        assert result.backend is fast
        assert isinstance(result.error, NonZeroExit)
        assert [call[0] for call in fast.calls] == ["create", "install"]
        assert standard.calls == []

    def test_empty_manifest_skips_install(self, env, tmp_path: Path) -> None:
        fast = FakeBackend("uv")
        empty = ResolvedManifest(name="my-env", platform=PlatformTag.LINUX)
        result = make_orchestrator(env, empty, tmp_path, fast, FakeBackend("venv")).run()

        assert result.state == State.DONE
        assert [call[0] for call in fast.calls] == ["create"]
        assert (tmp_path / "requirements.txt").read_text() == ""


class TestStep:
    def test_step_by_step(self, env, manifest, tmp_path: Path) -> None:
        orchestrator = make_orchestrator(env, manifest, tmp_path, FakeBackend("uv"), FakeBackend("venv"))
        assert orchestrator.state == State.START
        assert orchestrator.step() == State.CREATING_FAST
        assert orchestrator.step() == State.ENV_READY
        assert orchestrator.step() == State.INSTALLING
        assert orchestrator.step() == State.DONE

    def test_no_step_after_a_terminal_state(self, env, manifest, tmp_path: Path) -> None:
        orchestrator = make_orchestrator(env, manifest, tmp_path, FakeBackend("uv"), FakeBackend("venv"))
        orchestrator.run()
        with pytest.raises(RuntimeError):
            orchestrator.step()
