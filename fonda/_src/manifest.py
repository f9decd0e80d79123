import logging
from pathlib import Path

from fonda._src.models.environment import ResolvedManifest


logger = logging.getLogger(__name__)


def render(manifest: ResolvedManifest) -> str:
    """Render a manifest as requirements.txt content, one spec per line"""
    return "".join(f"{entry}\n" for entry in manifest.entries)


def write_manifest(manifest: ResolvedManifest, path: str | Path) -> Path:
    path = Path(path)
    with open(path, "w", encoding="utf-8", newline="\n") as requirements_file:
        requirements_file.write(render(manifest))
    logger.info("wrote %d requirements to %s", len(manifest.entries), path)
    return path
