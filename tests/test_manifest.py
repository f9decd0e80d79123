"""
Tests for the manifest writer.
"""

from pathlib import Path

from fonda._src.constants import PlatformTag
from fonda._src.manifest import render, write_manifest
from fonda._src.models.environment import EnvironmentSpec, ResolvedManifest
from fonda._src.resolve import resolve


def test_one_line_per_entry() -> None:
    manifest = ResolvedManifest(platform=PlatformTag.LINUX, entries=["numpy>=1.24.0", "-e ."])
    assert render(manifest) == "numpy>=1.24.0\n-e .\n"


def test_empty_manifest_renders_nothing() -> None:
    assert render(ResolvedManifest(platform=PlatformTag.LINUX)) == ""


def test_render_is_idempotent() -> None:
    env = EnvironmentSpec(
        name="env",
        dependencies=["numpy", "pywin32  # [win]", "pip:requests,rich"],
        pip=["git+https://host/repo.git@v1", "rich"],
    )
    first = render(resolve(env, PlatformTag.WINDOWS))
    second = render(resolve(env, PlatformTag.WINDOWS))
    assert first == second
    assert first == "numpy\npywin32\nrequests\nrich\ngit+https://host/repo.git@v1\n"


def test_write_manifest(tmp_path: Path) -> None:
    manifest = ResolvedManifest(platform=PlatformTag.MACOS, entries=["pyobjc>=8.0", "ünïcode-pkg"])
    path = write_manifest(manifest, tmp_path / "requirements.txt")
    assert path == tmp_path / "requirements.txt"
    assert path.read_bytes() == "pyobjc>=8.0\nünïcode-pkg\n".encode("utf-8")

    # writing twice gives the same bytes
    write_manifest(manifest, path)
    assert path.read_bytes() == "pyobjc>=8.0\nünïcode-pkg\n".encode("utf-8")
