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

"""Build the immutable :class:`SchemaTable` from schema data files.

The packaged table lives in ``data/html_living_standard.yaml``. Data is
checked against the ``schema_table`` JSON Schema, then cross-checked
(family references, ``extends`` cycles, vocabulary references) before the
table is constructed.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError as JsonSchemaValidationError

from ..config import ValidatorConfig
from ..exceptions import ConfigurationError, SchemaDefinitionError
from ..utils.format_version import FORMAT_FIELD, check_format_version
from ..utils.value_types import (
    ANY_KINDS,
    BOOL_KINDS,
    BOOLEANISH_KINDS,
    ENUM_KINDS,
    NUMBER_KINDS,
    STRING_KINDS,
    TOKEN_SET_KINDS,
    UNION_KINDS,
    is_supported_constraint_kind,
    normalize_kind_name,
)
from .constraints import (
    AnyOf,
    AnyValue,
    Boolean,
    BooleanishString,
    ClosedTokenSet,
    Constraint,
    Enum,
    FreeString,
    Number,
)
from .json_schema_loader import load_json_schema
from .schema_table import (
    LINK_TYPES_VOCABULARY,
    AttributeSpec,
    ElementFamily,
    ElementSchema,
    LinkTypeEntry,
    SchemaTable,
    TokenVocabulary,
    normalize_name,
)

logger = logging.getLogger(__name__)

DEFAULT_DATA_PATH = Path(__file__).parent.parent / "data" / "html_living_standard.yaml"


def parse_constraint(entry: Dict[str, Any], where: str) -> Constraint:
    """Turn the ``type``/``values``/``vocabulary``/``options`` fields of *entry* into a constraint."""
    kind = normalize_kind_name(entry.get("type", "string"))
    if not is_supported_constraint_kind(kind):
        raise SchemaDefinitionError(f"Unsupported constraint type '{kind}' at {where}")

    if kind in STRING_KINDS:
        return FreeString()
    if kind in ANY_KINDS:
        return AnyValue()
    if kind in BOOL_KINDS:
        return Boolean()
    if kind in BOOLEANISH_KINDS:
        return BooleanishString()
    if kind in NUMBER_KINDS:
        return Number()
    if kind in ENUM_KINDS:
        values = entry.get("values")
        if not values:
            raise SchemaDefinitionError(f"Enum constraint without 'values' at {where}")
        return Enum(frozenset(str(v) for v in values))
    if kind in TOKEN_SET_KINDS:
        vocabulary = entry.get("vocabulary")
        if not vocabulary:
            raise SchemaDefinitionError(f"Token-set constraint without 'vocabulary' at {where}")
        return ClosedTokenSet(vocabulary)
    if kind in UNION_KINDS:
        options = entry.get("options")
        if not options:
            raise SchemaDefinitionError(f"Union constraint without 'options' at {where}")
        return AnyOf(tuple(
            parse_constraint(option, f"{where}/options/{idx}") for idx, option in enumerate(options)
        ))
    raise SchemaDefinitionError(f"Unhandled constraint type '{kind}' at {where}")


def _parse_attributes(entries: Optional[Iterable[Dict[str, Any]]], where: str) -> Dict[str, AttributeSpec]:
    attributes: Dict[str, AttributeSpec] = {}
    for idx, entry in enumerate(entries or []):
        spec = AttributeSpec(
            name=entry["name"],
            constraint=parse_constraint(entry, f"{where}/{idx}"),
            deprecated=entry.get("deprecated", False),
            experimental=entry.get("experimental", False),
            description=entry.get("description", ""),
        )
        if spec.name in attributes:
            raise SchemaDefinitionError(f"Duplicate attribute '{spec.name}' at {where}")
        attributes[spec.name] = spec
    return attributes


def _check_family_chains(families: Dict[str, ElementFamily]) -> None:
    for family in families.values():
        seen: List[str] = [family.name]
        current = family
        while current.extends is not None:
            parent = families.get(current.extends)
            if parent is None:
                raise SchemaDefinitionError(
                    f"Family '{current.name}' extends unknown family '{current.extends}'"
                )
            if parent.name in seen:
                chain = " -> ".join(seen + [parent.name])
                raise SchemaDefinitionError(f"Family inheritance cycle: {chain}")
            seen.append(parent.name)
            current = parent


def _collect_token_references(attributes: Iterable[AttributeSpec]) -> List[str]:
    names: List[str] = []

    def _walk(constraint: Constraint) -> None:
        if isinstance(constraint, ClosedTokenSet):
            names.append(constraint.name)
        elif isinstance(constraint, AnyOf):
            for option in constraint.options:
                _walk(option)

    for spec in attributes:
        _walk(spec.constraint)
    return names


def _parse_link_entries(entries: Iterable[Dict[str, Any]], where: str) -> Dict[str, LinkTypeEntry]:
    parsed: Dict[str, LinkTypeEntry] = {}
    for entry in entries:
        token = entry["token"]
        if token in parsed:
            raise SchemaDefinitionError(f"Duplicate token '{token}' in {where}")
        hosts = entry.get("hosts") or []
        if not hosts:
            raise SchemaDefinitionError(f"Token '{token}' in {where} has no allowed host elements")
        parsed[token] = LinkTypeEntry(
            token=token,
            allowed_hosts=frozenset(hosts),
            deprecated=entry.get("deprecated", False),
            experimental=entry.get("experimental", False),
            description=entry.get("description", ""),
        )
    return parsed


def build_schema_table(
    data: Dict[str, Any],
    config: Optional[ValidatorConfig] = None,
    source: str = "<memory>",
) -> SchemaTable:
    """Validate raw table data and construct the immutable :class:`SchemaTable`.

    Raises:
        SchemaDefinitionError: If the data is malformed or inconsistent.
        FormatVersionError: If the data declares an incompatible format version.
        ConfigurationError: If configured extra link types clash with the table.
    """
    config = config or ValidatorConfig()

    if not isinstance(data, dict):
        raise SchemaDefinitionError(f"Schema data root must be a mapping: {source}")

    declared_version = check_format_version(data.get(FORMAT_FIELD), str(source))

    try:
        jsonschema.validate(
            instance=data,
            schema=load_json_schema("schema_table", declared_version),
        )
    except JsonSchemaValidationError as e:
        path = "/" + "/".join(str(p) for p in e.absolute_path) if e.absolute_path else ""
        raise SchemaDefinitionError(f"{e.message} at '{path}' ({source})") from e

    global_attributes = _parse_attributes(data.get("global_attributes"), "/global_attributes")

    families: Dict[str, ElementFamily] = {}
    for name, body in (data.get("families") or {}).items():
        body = body or {}
        families[name] = ElementFamily(
            name=name,
            attributes=_parse_attributes(body.get("attributes"), f"/families/{name}/attributes"),
            extends=body.get("extends"),
            description=body.get("description", ""),
        )
    _check_family_chains(families)

    elements: Dict[str, ElementSchema] = {}
    for tag, body in (data.get("elements") or {}).items():
        body = body or {}
        key = normalize_name(tag)
        if key in elements:
            raise SchemaDefinitionError(f"Duplicate element '{tag}' ({source})")
        family = body.get("family")
        if family is not None and family not in families:
            raise SchemaDefinitionError(f"Element '{tag}' refers to unknown family '{family}'")
        elements[key] = ElementSchema(
            tag=key,
            family=family,
            own_attributes=_parse_attributes(body.get("attributes"), f"/elements/{tag}/attributes"),
            is_empty_element=body.get("empty", False),
            deprecated=body.get("deprecated", False),
            description=body.get("description", ""),
        )

    vocabulary_entries: Dict[str, Dict[str, LinkTypeEntry]] = {
        name: _parse_link_entries(entries, f"vocabulary '{name}'")
        for name, entries in (data.get("vocabularies") or {}).items()
    }

    if config.extra_link_types:
        link_types = vocabulary_entries.setdefault(LINK_TYPES_VOCABULARY, {})
        for extra in config.extra_link_types:
            if extra.token in link_types:
                raise ConfigurationError(
                    f"Extra link type '{extra.token}' is already defined by the schema table"
                )
            link_types[extra.token] = LinkTypeEntry(
                token=extra.token,
                allowed_hosts=frozenset(extra.hosts),
                deprecated=extra.deprecated,
                experimental=extra.experimental,
                description=extra.description,
            )
            logger.debug(f"Added extra link type '{extra.token}' for hosts {sorted(extra.hosts)}")

    all_attributes: List[AttributeSpec] = list(global_attributes.values())
    for family in families.values():
        all_attributes.extend(family.attributes.values())
    for element in elements.values():
        all_attributes.extend(element.own_attributes.values())
    for name in _collect_token_references(all_attributes):
        if name not in vocabulary_entries:
            raise SchemaDefinitionError(f"Token-set constraint refers to unknown vocabulary '{name}'")

    table = SchemaTable(
        global_attributes=global_attributes.values(),
        families=families.values(),
        elements=elements.values(),
        vocabularies=[TokenVocabulary(name, entries.values()) for name, entries in vocabulary_entries.items()],
        format_version=declared_version,
    )
    logger.debug(
        f"Built schema table from {source}: {len(global_attributes)} global attributes, "
        f"{len(families)} families, {len(elements)} elements"
    )
    return table


def load_schema_table(
    data_path: Optional[Union[str, Path]] = None,
    config: Optional[ValidatorConfig] = None,
) -> SchemaTable:
    """Load schema data from YAML (the packaged table by default) and build the table."""
    path = Path(data_path) if data_path is not None else DEFAULT_DATA_PATH
    if not path.is_file():
        raise SchemaDefinitionError(f"Schema data file not found: {path}")

    logger.debug(f"Loading schema data: {path}")
    try:
        with open(path, "r", encoding="utf-8") as stream:
            data = yaml.safe_load(stream)
    except yaml.YAMLError as exc:
        raise SchemaDefinitionError(f"Failed to parse YAML file {path}: {exc}") from exc

    return build_schema_table(data or {}, config=config, source=str(path))
