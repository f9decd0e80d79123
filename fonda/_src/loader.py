# Environment files are read with ruamel.yaml instead of a plain yaml
# loader because the platform markers live in comments, eg.
#
#   - pywin32>=300  # [win]
#
# and would otherwise be thrown away. The trailing comment of each list
# item is glued back onto the entry so the classifier sees the line the
# way it was written.
import logging
import re
from pathlib import Path
from typing import Any, List, Optional, Tuple

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedSeq
from ruamel.yaml.error import YAMLError

from fonda._src.exceptions import EnvironmentFileError
from fonda._src.models.environment import EnvironmentSpec


logger = logging.getLogger(__name__)

SCALAR_FIELDS = ("name", "python_version")
SCALAR_COMMENT_PATTERN = re.compile(r"\s#")


def load_environment_file(path: str | Path) -> EnvironmentSpec:
    """Load an environment.yaml file, keeping the marker comments of its entries"""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
        raw_env_spec = YAML().load(text)
    except (OSError, UnicodeDecodeError, YAMLError) as err:
        raise EnvironmentFileError(path, err) from err

    env_spec = parse_environment(raw_env_spec, source=path, text=text)
    logger.debug(
        "loaded environment `%s` from %s (%d dependencies, %d pip)",
        env_spec.name, path, len(env_spec.dependencies), len(env_spec.pip),
    )
    return env_spec


def parse_environment(
    raw_env_spec: Any,
    source: str | Path = "<string>",
    text: Optional[str] = None,
) -> EnvironmentSpec:
    """Build an EnvironmentSpec from an already loaded yaml document.

    A conda-style nested `- pip: [...]` item inside `dependencies` is moved
    to the pip section, ahead of the entries of the top level `pip` list.
    When the source `text` of the document is given, unquoted scalars like
    `python_version: 3.10` are kept as written instead of read as numbers.
    """
    if not isinstance(raw_env_spec, dict):
        raise EnvironmentFileError(source, "expected a mapping at the top level")

    dependencies, nested_pip = _split_nested_pip(raw_env_spec.get("dependencies"))
    data = dict(raw_env_spec)
    for key in SCALAR_FIELDS:
        if key in data:
            data[key] = _scalar_text(raw_env_spec, key, text)
    data["dependencies"] = dependencies
    data["pip"] = nested_pip + _entries(raw_env_spec.get("pip"))
    try:
        return EnvironmentSpec.model_validate(data)
    except ValidationError as err:
        raise EnvironmentFileError(source, err) from err


def _scalar_text(document: Any, key: str, text: Optional[str]) -> Any:
    value = document[key]
    if value is None or isinstance(value, (str, dict, list)):
        return value
    # numbers and booleans, `3.10` must not come back as `3.1`
    position = _position_of(document, key)
    if text is not None and position is not None:
        line, column = position
        written = text.splitlines()[line][column:]
        return SCALAR_COMMENT_PATTERN.split(written, 1)[0].strip()
    return str(value)


def _split_nested_pip(node: Any) -> Tuple[List[Any], List[Any]]:
    if node is None:
        return [], []
    if not isinstance(node, list):
        return node, []

    dependencies = []
    nested_pip = []
    for index, item in enumerate(node):
        if isinstance(item, dict) and "pip" in item:
            nested_pip.extend(_entries(item["pip"], parent=item, key="pip"))
        elif item is not None:
            dependencies.append(_with_comment(item, node, index))
    return dependencies, nested_pip


def _entries(node: Any, parent: Any = None, key: Any = None) -> List[Any]:
    if node is None:
        return []
    if not isinstance(node, list):
        # a single entry, eg. `pip: requests  # [win]`
        return [_with_comment(node, parent, key)]
    return [
        _with_comment(item, node, index)
        for index, item in enumerate(node)
        if item is not None
    ]


def _with_comment(item: Any, container: Any, key: Any) -> Any:
    if isinstance(item, (dict, list)):
        # left for validation to reject
        return item
    entry = str(item)
    comment = _trailing_comment(container, key)
    if comment:
        entry = f"{entry}  {comment}"
    return entry


def _trailing_comment(container: Any, key: Any) -> Optional[str]:
    comment_attrib = getattr(container, "ca", None)
    if comment_attrib is None:
        return None
    tokens = comment_attrib.items.get(key)
    if not tokens:
        return None

    line = _line_of(container, key)
    for token in _flatten(tokens):
        mark = getattr(token, "start_mark", None)
        # comments on the following lines are attached to the same item
        if line is not None and mark is not None and mark.line != line:
            continue
        first_line = token.value.split("\n", 1)[0].strip()
        if first_line.startswith("#"):
            return first_line
    return None


def _line_of(container: Any, key: Any) -> Optional[int]:
    position = _position_of(container, key)
    return position[0] if position is not None else None


def _position_of(container: Any, key: Any) -> Optional[Tuple[int, int]]:
    try:
        if isinstance(container, CommentedSeq):
            return tuple(container.lc.item(key))
        return tuple(container.lc.value(key))
    except (AttributeError, KeyError, TypeError, IndexError):
        return None


def _flatten(tokens):
    for token in tokens:
        if token is None:
            continue
        if isinstance(token, list):
            yield from _flatten(token)
        else:
            yield token
