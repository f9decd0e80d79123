import logging
import re
from typing import List, Optional, Tuple

from fonda._src.constants import (
    COMPACT_PIP_PREFIX,
    EDITABLE_FLAGS,
    GIT_PREFIX,
    MARKER_TAGS,
    URL_SCHEMES,
    VERSION_OPERATOR_CHARS,
    PlatformTag,
    Section,
)
from fonda._src.exceptions import (
    DuplicateEditableFlag,
    EmptySpec,
    MalformedGitRef,
    UnknownPlatformMarker,
)
from fonda._src.models.dependency import (
    DependencySpec,
    EditableInstall,
    GitDependency,
    LocalPath,
    PipPackage,
    PlainPackage,
    UrlDependency,
)


logger = logging.getLogger(__name__)

# urls and editables follow the rule pip uses for requirements files: a
# comment starts at a `#` at the beginning of the line or after whitespace,
# so `...#egg=foo` is kept. Anywhere else the first `#` starts the comment.
URL_COMMENT_PATTERN = re.compile(r"(?:^|\s)#")
COMMENT_PATTERN = re.compile(r"#")
MARKER_PATTERN = re.compile(r"\[([^\[\]]*)\]")


def classify(raw_line: str, section: Section) -> List[DependencySpec]:
    """Classify one raw dependency line of an environment file.

    Parameters
    ----------
    raw_line: str
        The entry as written in the file, including any `# [tag]` comment
    section: Section
        The section of the document the entry was found in. Plain names
        become PlainPackage in the conda section and PipPackage in the
        pip section.

    Returns
    -------
    specs: list[DependencySpec]
        Empty for blank and comment-only lines. A compact `pip:a,b` entry
        yields one spec per name, anything else exactly one spec.

    Raises
    ------
    ClassificationError
        With the offending line attached, if the marker or the spec
        itself is malformed.
    """
    spec_text, comment = _split_comment(raw_line.strip())
    if not spec_text:
        return []

    platform = _parse_marker(raw_line, comment)

    if spec_text.startswith(COMPACT_PIP_PREFIX):
        kinds = _classify_compact(raw_line, spec_text[len(COMPACT_PIP_PREFIX):])
    else:
        kinds = [_classify_text(raw_line, spec_text, section)]

    specs = [
        DependencySpec(raw_line=raw_line, kind=kind, platform=platform, section=section)
        for kind in kinds
    ]
    for spec in specs:
        logger.debug("classified `%s` as %s [%s]", raw_line.strip(), spec.kind, platform.value)
    return specs


def _split_comment(line: str) -> Tuple[str, str]:
    pattern = URL_COMMENT_PATTERN if _is_url_like(line) else COMMENT_PATTERN
    match = pattern.search(line)
    if match is None:
        return line, ""
    return line[:match.start()].strip(), line[match.end():]


def _is_url_like(line: str) -> bool:
    if line.startswith(COMPACT_PIP_PREFIX):
        line = line[len(COMPACT_PIP_PREFIX):].lstrip()
    if not line:
        return False
    return line.startswith((GIT_PREFIX,) + URL_SCHEMES) or _editable_target(line) is not None


def _parse_marker(raw_line: str, comment: str) -> PlatformTag:
    tags = MARKER_PATTERN.findall(comment)
    if not tags:
        return PlatformTag.ANY
    if len(tags) > 1:
        raise UnknownPlatformMarker(raw_line, "only a single platform marker is allowed")

    tag = tags[0].strip().lower()
    if tag not in MARKER_TAGS:
        raise UnknownPlatformMarker(
            raw_line, f"`[{tags[0]}]` is not one of {', '.join(MARKER_TAGS)}"
        )
    return MARKER_TAGS[tag]


def _classify_text(raw_line: str, text: str, section: Section):
    target = _editable_target(text)
    if target is not None:
        if not target:
            raise EmptySpec(raw_line, "nothing to install after the editable flag")
        if _editable_target(target) is not None:
            raise DuplicateEditableFlag(raw_line)
        return EditableInstall(target=_classify_editable_target(raw_line, target))

    if text.startswith(GIT_PREFIX):
        return _parse_git(raw_line, text)
    if text.startswith(URL_SCHEMES):
        return UrlDependency(url=text)
    if section == Section.PIP:
        return PipPackage(name_and_constraint=text)
    return PlainPackage(name_and_constraint=text)


def _editable_target(text: str) -> Optional[str]:
    """Return what follows an editable flag, or None if `text` is not editable"""
    if text.startswith("--editable="):
        return text[len("--editable="):].strip()
    parts = text.split(None, 1)
    if parts[0] not in EDITABLE_FLAGS:
        return None
    return parts[1].strip() if len(parts) > 1 else ""


def _classify_editable_target(raw_line: str, target: str):
    if target.startswith(GIT_PREFIX):
        return _parse_git(raw_line, target)
    if target.startswith(URL_SCHEMES):
        return UrlDependency(url=target)
    return LocalPath(path=target)


def _parse_git(raw_line: str, text: str) -> GitDependency:
    if not text[len(GIT_PREFIX):]:
        raise EmptySpec(raw_line, f"nothing after `{GIT_PREFIX}`")

    url, has_fragment, fragment = text.partition("#")
    scheme, has_scheme, rest = url.partition("://")
    if not has_scheme:
        raise MalformedGitRef(raw_line, "git urls need a scheme, eg. git+https://")

    # only look for the ref in the path, `git+ssh://git@host/...` carries a user
    netloc, slash, path = rest.partition("/")
    if "@" not in path:
        return GitDependency(url=url, fragment=fragment if has_fragment else None)

    repo, _, ref = path.rpartition("@")
    if not ref.strip():
        raise MalformedGitRef(raw_line, "no ref given after `@`")
    return GitDependency(
        url=f"{scheme}://{netloc}{slash}{repo}",
        ref=ref,
        fragment=fragment if has_fragment else None,
    )


def _classify_compact(raw_line: str, remainder: str):
    names: List[str] = []
    for segment in remainder.split(","):
        segment = segment.strip()
        if not segment:
            continue
        # `pip:numpy>=1,<2` keeps `<2` as part of the numpy constraint
        if names and segment[0] in VERSION_OPERATOR_CHARS:
            names[-1] += f",{segment}"
        else:
            names.append(segment)

    if not names:
        raise EmptySpec(raw_line, f"no packages after `{COMPACT_PIP_PREFIX}`")
    return [_classify_text(raw_line, name, Section.PIP) for name in names]
