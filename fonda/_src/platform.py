import functools
import logging

from rattler import Platform

from fonda._src.constants import MARKER_TAGS, PlatformTag, RATTLER_PLATFORM_PREFIXES
from fonda._src.exceptions import UnsupportedPlatformError


logger = logging.getLogger(__name__)


def current_platform() -> PlatformTag:
    """Return the tag of the platform fonda is running on.

    Raises
    ------
    UnsupportedPlatformError
        If the host is not windows, linux or macos. No marked entry could
        ever match on such a host.
    """
    return _platform_tag(_host_platform())


@functools.lru_cache(maxsize=None)
def _host_platform() -> str:
    # the host is only queried once per run
    host = str(Platform.current())
    logger.debug("detected host platform %s", host)
    return host


def _platform_tag(host: str) -> PlatformTag:
    for prefix, tag in RATTLER_PLATFORM_PREFIXES.items():
        if host.startswith(prefix):
            return tag
    raise UnsupportedPlatformError(host)


def parse_platform(value: str) -> PlatformTag:
    """Map a user supplied platform name to a PlatformTag.

    Accepts the tag values themselves (`windows`, `linux`, `macos`) as well
    as the marker spellings (`win`, `osx`, `darwin`).
    """
    value = value.strip().lower()
    if value in MARKER_TAGS:
        return MARKER_TAGS[value]
    try:
        tag = PlatformTag(value)
    except ValueError:
        raise UnsupportedPlatformError(value) from None
    if tag == PlatformTag.ANY:
        raise UnsupportedPlatformError(value)
    return tag
