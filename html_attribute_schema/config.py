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

"""Validator configuration."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError as JsonSchemaValidationError

from .exceptions import ConfigurationError
from .models.json_schema_loader import load_json_schema

logger = logging.getLogger(__name__)

DEFAULT_PASSTHROUGH_PREFIXES = ("data-", "aria-")


@dataclass(frozen=True)
class ExtraLinkType:
    """A vendor-specific ``rel`` token added to the link-type vocabulary."""
    token: str
    hosts: Tuple[str, ...]
    deprecated: bool = False
    experimental: bool = False
    description: str = ""


@dataclass(frozen=True)
class ValidatorConfig:
    """Policy knobs for schema loading and validation."""
    rel_case_sensitive: bool = True
    report_unknown_elements: bool = True
    passthrough_prefixes: Tuple[str, ...] = DEFAULT_PASSTHROUGH_PREFIXES
    disabled_codes: Tuple[str, ...] = ()
    extra_link_types: Tuple[ExtraLinkType, ...] = ()

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'ValidatorConfig':
        """Create configuration from a mapping, validating it against the config JSON Schema."""
        data = data or {}
        try:
            jsonschema.validate(instance=data, schema=load_json_schema("config"))
        except JsonSchemaValidationError as e:
            path = "/" + "/".join(str(p) for p in e.absolute_path) if e.absolute_path else ""
            raise ConfigurationError(f"Invalid validator configuration at '{path}': {e.message}") from e

        extra = tuple(
            ExtraLinkType(
                token=item["token"],
                hosts=tuple(item["hosts"]),
                deprecated=item.get("deprecated", False),
                experimental=item.get("experimental", False),
                description=item.get("description", ""),
            )
            for item in data.get("extra_link_types", [])
        )
        return cls(
            rel_case_sensitive=data.get("rel_case_sensitive", True),
            report_unknown_elements=data.get("report_unknown_elements", True),
            passthrough_prefixes=tuple(
                p.lower() for p in data.get("passthrough_prefixes", DEFAULT_PASSTHROUGH_PREFIXES)
            ),
            disabled_codes=tuple(data.get("disabled_codes", ())),
            extra_link_types=extra,
        )


def load_config(file_path: Union[str, Path]) -> ValidatorConfig:
    """Load a validator configuration from a YAML file.

    Raises:
        ConfigurationError: If the file is missing, unparsable, or fails validation.
    """
    path = Path(file_path)
    if not path.is_file():
        raise ConfigurationError(f"Configuration file not found: {path}")

    logger.debug(f"Loading validator configuration: {path}")
    try:
        with open(path, "r", encoding="utf-8") as stream:
            data = yaml.safe_load(stream)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse YAML file {path}: {exc}") from exc

    if data is not None and not isinstance(data, dict):
        raise ConfigurationError(f"Configuration root must be a mapping: {path}")
    return ValidatorConfig.from_dict(data)
