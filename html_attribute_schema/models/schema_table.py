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

"""Immutable schema table: attributes, element families, elements and vocabularies."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Mapping, Optional

from .constraints import Constraint, FreeString


def normalize_name(name) -> str:
    """Attribute and tag names compare ASCII case-insensitively."""
    return str(name).lower()


def _freeze(mapping: Optional[Mapping]) -> Mapping:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class AttributeSpec:
    name: str
    constraint: Constraint = field(default_factory=FreeString)
    deprecated: bool = False
    experimental: bool = False
    description: str = ""

    def __post_init__(self):
        object.__setattr__(self, "name", normalize_name(self.name))


def attribute_map(specs: Iterable[AttributeSpec]) -> Mapping[str, AttributeSpec]:
    """Key attribute specs by normalized name; later entries replace earlier ones."""
    return _freeze({spec.name: spec for spec in specs})


@dataclass(frozen=True)
class ElementFamily:
    name: str
    attributes: Mapping[str, AttributeSpec] = field(default_factory=dict)
    extends: Optional[str] = None
    description: str = ""

    def __post_init__(self):
        object.__setattr__(self, "attributes", _freeze(self.attributes))


@dataclass(frozen=True)
class ElementSchema:
    tag: str
    family: Optional[str] = None
    own_attributes: Mapping[str, AttributeSpec] = field(default_factory=dict)
    is_empty_element: bool = False
    deprecated: bool = False
    description: str = ""

    def __post_init__(self):
        object.__setattr__(self, "tag", normalize_name(self.tag))
        object.__setattr__(self, "own_attributes", _freeze(self.own_attributes))


@dataclass(frozen=True)
class LinkTypeEntry:
    token: str
    allowed_hosts: FrozenSet[str]
    deprecated: bool = False
    experimental: bool = False
    description: str = ""

    def __post_init__(self):
        object.__setattr__(
            self, "allowed_hosts", frozenset(normalize_name(h) for h in self.allowed_hosts)
        )

    def allows_host(self, tag: str) -> bool:
        return normalize_name(tag) in self.allowed_hosts


class TokenVocabulary:
    """A closed set of tokens, each restricted to a set of host elements."""

    def __init__(self, name: str, entries: Iterable[LinkTypeEntry]):
        self.name = name
        self._entries: Mapping[str, LinkTypeEntry] = _freeze({e.token: e for e in entries})
        # Case-folded index for the case-insensitive lookup policy.
        folded: Dict[str, LinkTypeEntry] = {}
        for token in sorted(self._entries):
            folded.setdefault(token.lower(), self._entries[token])
        self._folded: Mapping[str, LinkTypeEntry] = _freeze(folded)

    def lookup(self, token: str, case_sensitive: bool = True) -> Optional[LinkTypeEntry]:
        if case_sensitive:
            return self._entries.get(token)
        return self._folded.get(token.lower())

    def tokens_for_host(self, tag: str) -> FrozenSet[str]:
        return frozenset(t for t, e in self._entries.items() if e.allows_host(tag))

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries.values())


LINK_TYPES_VOCABULARY = "link-types"


class SchemaTable:
    """Read-only schema data shared by all validations.

    Build it once (normally with :func:`load_schema_table`) and pass the
    handle into :class:`SchemaResolver` / :class:`Validator`.
    """

    def __init__(
        self,
        global_attributes: Iterable[AttributeSpec],
        families: Iterable[ElementFamily] = (),
        elements: Iterable[ElementSchema] = (),
        vocabularies: Iterable[TokenVocabulary] = (),
        format_version: Optional[str] = None,
    ):
        self._globals = attribute_map(global_attributes)
        self._families: Mapping[str, ElementFamily] = _freeze({f.name: f for f in families})
        self._elements: Mapping[str, ElementSchema] = _freeze({e.tag: e for e in elements})
        self._vocabularies: Mapping[str, TokenVocabulary] = _freeze({v.name: v for v in vocabularies})
        self.format_version = format_version

    def lookup_element(self, tag) -> Optional[ElementSchema]:
        return self._elements.get(normalize_name(tag))

    def global_attributes(self) -> Mapping[str, AttributeSpec]:
        return self._globals

    def lookup_family(self, name: Optional[str]) -> Optional[ElementFamily]:
        if name is None:
            return None
        return self._families.get(name)

    def lookup_vocabulary(self, name: str) -> Optional[TokenVocabulary]:
        return self._vocabularies.get(name)

    def lookup_link_type(self, token: str, case_sensitive: bool = True) -> Optional[LinkTypeEntry]:
        vocabulary = self.lookup_vocabulary(LINK_TYPES_VOCABULARY)
        if vocabulary is None:
            return None
        return vocabulary.lookup(token, case_sensitive=case_sensitive)

    @property
    def family_names(self) -> FrozenSet[str]:
        return frozenset(self._families)

    @property
    def empty_element_tags(self) -> FrozenSet[str]:
        return frozenset(tag for tag, e in self._elements.items() if e.is_empty_element)
