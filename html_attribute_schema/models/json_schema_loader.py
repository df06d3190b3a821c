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

"""JSON Schema loader for schema data files and validator configuration."""

import json
import logging
from pathlib import Path
from typing import Dict, Optional

from .. import SCHEMA_FORMAT_VERSION
from ..exceptions import FormatVersionError
from ..utils.format_version import format_version_str, parse_format_version

logger = logging.getLogger(__name__)

# Schema cache to avoid reloading files
_SCHEMA_CACHE: Dict[str, dict] = {}


def _schema_root() -> Path:
    return Path(__file__).parent.parent / "schema"


def get_schema_path(schema_name: str, version: str) -> Path:
    """Get the path to a JSON Schema file.

    Args:
        schema_name: Schema name (schema_table, config)
        version: Format version string (e.g., "0.1.0")
    """
    return _schema_root() / version / f"{schema_name}.json"


def resolve_schema_version(schema_name: str, version: str) -> str:
    """Pick the schema directory for *version*.

    The exact version wins; otherwise the newest shipped schema with the same
    major version is used. Unparsable versions are returned unchanged.
    """
    if get_schema_path(schema_name, version).exists():
        return version
    try:
        major = parse_format_version(version)[0]
    except FormatVersionError:
        return version

    candidates = []
    for version_dir in _schema_root().iterdir():
        try:
            dir_version = parse_format_version(version_dir.name)
        except FormatVersionError:
            continue
        if dir_version[0] == major and (version_dir / f"{schema_name}.json").exists():
            candidates.append(dir_version)

    if not candidates:
        return version
    resolved = format_version_str(max(candidates))
    logger.debug(f"No {schema_name} schema for {version}; using {resolved}")
    return resolved


def load_json_schema(schema_name: str, version: Optional[str] = None) -> dict:
    """Load a JSON Schema file for the given name and version.

    Raises:
        FileNotFoundError: If the schema file doesn't exist
        json.JSONDecodeError: If the schema file is invalid JSON
    """
    version = version or SCHEMA_FORMAT_VERSION
    resolved_version = resolve_schema_version(schema_name, version)

    cache_key = f"{schema_name}-v{resolved_version}"
    if cache_key in _SCHEMA_CACHE:
        return _SCHEMA_CACHE[cache_key]

    schema_path = get_schema_path(schema_name, resolved_version)
    if not schema_path.exists():
        raise FileNotFoundError(
            f"Schema file not found for {schema_name} version {version} "
            f"(resolved to {resolved_version}): {schema_path}"
        )

    logger.debug(f"Loading JSON Schema {schema_path}")
    try:
        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)
    except json.JSONDecodeError as e:
        raise json.JSONDecodeError(
            f"Invalid JSON in schema file {schema_path}: {e.msg}",
            e.doc,
            e.pos,
        ) from e

    _SCHEMA_CACHE[cache_key] = schema
    return schema


def clear_cache() -> None:
    """Clear the schema cache. Useful for testing."""
    _SCHEMA_CACHE.clear()
