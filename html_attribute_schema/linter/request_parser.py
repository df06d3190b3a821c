# Copyright 2026 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Load request files: lists of (tag, attributes) pairs extracted from markup."""

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError as JsonSchemaValidationError

from ..exceptions import ConfigurationError
from ..models.json_schema_loader import load_json_schema

logger = logging.getLogger(__name__)

SourceMap = Dict[str, Dict[str, int]]


@dataclass(frozen=True)
class SourceLocation:
    yaml_path: Optional[str] = None
    line: Optional[int] = None  # 1-based
    column: Optional[int] = None  # 1-based


@dataclass
class ElementRequest:
    tag: str
    attributes: Dict[str, Any] = field(default_factory=dict)
    yaml_path: str = ""


def _json_pointer_escape(token: str) -> str:
    # JSON Pointer escaping: "~" -> "~0", "/" -> "~1"
    return token.replace("~", "~0").replace("/", "~1")


def build_source_map(content: str) -> SourceMap:
    """Map JSON-pointer-like YAML paths to 1-based line/column.

    Uses PyYAML's node tree (yaml.compose) so locations are tracked without
    changing the data shapes returned by :func:`parse_requests`.
    """
    source_map: SourceMap = {}
    try:
        root = yaml.compose(content, Loader=yaml.SafeLoader)
    except yaml.YAMLError:
        return source_map
    if root is None:
        return source_map

    def _walk(node, path: str) -> None:
        mark = getattr(node, "start_mark", None)
        if mark is not None:
            # PyYAML uses 0-based line/column
            source_map[path] = {"line": int(mark.line) + 1, "column": int(mark.column) + 1}

        if isinstance(node, yaml.nodes.MappingNode):
            for key_node, value_node in node.value:
                key = getattr(key_node, "value", None)
                if key is None:
                    continue
                child_path = f"{path}/{_json_pointer_escape(str(key))}"
                # Attribute diagnostics point at the key, not the (possibly empty) value.
                key_mark = key_node.start_mark
                source_map[child_path] = {"line": int(key_mark.line) + 1, "column": int(key_mark.column) + 1}
                if isinstance(value_node, (yaml.nodes.MappingNode, yaml.nodes.SequenceNode)):
                    _walk(value_node, child_path)
        elif isinstance(node, yaml.nodes.SequenceNode):
            for idx, item_node in enumerate(node.value):
                _walk(item_node, f"{path}/{idx}")

    _walk(root, "")
    return source_map


def lookup_source(source_map: Optional[SourceMap], yaml_path: Optional[str]) -> SourceLocation:
    if not source_map or yaml_path is None:
        return SourceLocation(yaml_path=yaml_path)
    entry = source_map.get(yaml_path)
    if not entry:
        return SourceLocation(yaml_path=yaml_path)
    return SourceLocation(yaml_path=yaml_path, line=entry.get("line"), column=entry.get("column"))


_NULL_TAG = "tag:yaml.org,2002:null"


def _node_to_text_data(node) -> Any:
    """Convert a composed YAML node into plain data without scalar retyping.

    Markup attribute values are text, so ``id: 123`` or ``translate: no`` keep
    their source text. A null scalar (``checked:``) stays None, the
    presence-only form.
    """
    if isinstance(node, yaml.nodes.MappingNode):
        return {str(_node_to_text_data(key)): _node_to_text_data(value) for key, value in node.value}
    if isinstance(node, yaml.nodes.SequenceNode):
        return [_node_to_text_data(item) for item in node.value]
    if node is None or node.tag == _NULL_TAG:
        return None
    return node.value


def parse_requests(content: str) -> Tuple[List[ElementRequest], SourceMap]:
    """Parse request file content (YAML or JSON).

    Raises:
        ConfigurationError: If the content cannot be parsed or has the wrong shape.
    """
    try:
        data = _node_to_text_data(yaml.compose(content, Loader=yaml.SafeLoader))
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse request file: {exc}") from exc

    if data is None:
        data = []

    try:
        jsonschema.validate(instance=data, schema=load_json_schema("requests"))
    except JsonSchemaValidationError as e:
        path = "/" + "/".join(str(p) for p in e.absolute_path) if e.absolute_path else ""
        raise ConfigurationError(f"Invalid request file at '{path}': {e.message}") from e

    if isinstance(data, dict):
        items, base = data["elements"], "/elements"
    else:
        items, base = data, ""

    requests = [
        ElementRequest(
            tag=item["tag"],
            attributes=dict(item.get("attributes") or {}),
            yaml_path=f"{base}/{idx}",
        )
        for idx, item in enumerate(items)
    ]
    return requests, build_source_map(content)


def load_requests(file_path: Union[str, Path]) -> Tuple[List[ElementRequest], SourceMap]:
    path = Path(file_path)
    if not path.is_file():
        raise ConfigurationError(f"Request file not found: {path}")
    logger.debug(f"Loading request file: {path}")
    return parse_requests(path.read_text(encoding="utf-8"))


def attribute_path(request: ElementRequest, name: str) -> str:
    return f"{request.yaml_path}/attributes/{_json_pointer_escape(name)}"
