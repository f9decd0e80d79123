import logging
from typing import List

from fonda._src.classify import classify
from fonda._src.constants import PlatformTag, Section
from fonda._src.models.dependency import DependencySpec
from fonda._src.models.environment import EnvironmentSpec, ResolvedManifest


logger = logging.getLogger(__name__)


def classify_environment(env: EnvironmentSpec) -> List[DependencySpec]:
    """Classify every entry of an environment in document order.

    All `dependencies` entries come first, followed by all `pip` entries.
    The first ClassificationError is raised as is.
    """
    specs = []
    for section, entries in ((Section.CONDA, env.dependencies), (Section.PIP, env.pip)):
        for raw_line in entries:
            specs.extend(classify(raw_line, section))
    return specs


def resolve(env: EnvironmentSpec, platform: PlatformTag) -> ResolvedManifest:
    """Resolve an environment into the manifest for a single platform.

    Entries without a marker are always included, marked entries only when
    their marker matches `platform`. A spec string identical to an earlier
    one is dropped. Resolution is all or nothing: any classification error
    is raised and no manifest is returned.
    """
    entries: List[str] = []
    seen = set()
    for spec in classify_environment(env):
        if not spec.applies_to(platform):
            logger.debug("skipping `%s`, only for %s", spec.to_requirement(), spec.platform.value)
            continue

        requirement = spec.to_requirement()
        if requirement in seen:
            logger.debug("dropping duplicate `%s`", requirement)
            continue
        seen.add(requirement)
        entries.append(requirement)

    logger.info("resolved %d dependencies for %s", len(entries), platform.value)
    return ResolvedManifest(name=env.name, platform=platform, entries=entries)
