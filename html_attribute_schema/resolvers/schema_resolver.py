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

import logging
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from ..models.schema_table import AttributeSpec, ElementFamily, ElementSchema, SchemaTable, normalize_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedSchema:
    """Effective attribute map for one tag."""
    tag: str
    attributes: Mapping[str, AttributeSpec]
    element: Optional[ElementSchema] = None

    @property
    def known(self) -> bool:
        return self.element is not None

    def lookup(self, name) -> Optional[AttributeSpec]:
        return self.attributes.get(normalize_name(name))


class SchemaResolver:
    """Compose global, family and element-specific attributes for a tag.

    Precedence, lowest to highest: global attributes, the family chain from
    the furthest ancestor to the nearest, the element's own attributes.
    Known tags are memoized, each computed once under a lock. Unknown tags
    share one globals-only mapping and are never cached.
    """

    def __init__(self, table: SchemaTable):
        self.table = table
        self._cache: Dict[str, ResolvedSchema] = {}
        self._lock = threading.Lock()
        self._globals_only: Mapping[str, AttributeSpec] = MappingProxyType(dict(table.global_attributes()))

    def _merge(self, base: Dict[str, AttributeSpec], override: Mapping[str, AttributeSpec]) -> Dict[str, AttributeSpec]:
        """Merge override into base; same-named entries in override replace those in base."""
        if not override:
            return base
        merged = dict(base)
        for name, spec in override.items():
            merged[normalize_name(name)] = spec
        return merged

    def family_chain(self, family_name: Optional[str]) -> List[ElementFamily]:
        """Return the family and its ancestors, furthest ancestor first."""
        chain: List[ElementFamily] = []
        seen = set()
        current = self.table.lookup_family(family_name)
        while current is not None and current.name not in seen:
            seen.add(current.name)
            chain.append(current)
            current = self.table.lookup_family(current.extends)
        chain.reverse()
        return chain

    def _compute(self, tag: str, element: ElementSchema) -> ResolvedSchema:
        attributes: Dict[str, AttributeSpec] = dict(self.table.global_attributes())
        for family in self.family_chain(element.family):
            attributes = self._merge(attributes, family.attributes)
        attributes = self._merge(attributes, element.own_attributes)
        return ResolvedSchema(tag=tag, attributes=MappingProxyType(attributes), element=element)

    def resolve(self, tag) -> ResolvedSchema:
        key = normalize_name(tag)
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        element = self.table.lookup_element(key)
        if element is None:
            return ResolvedSchema(tag=key, attributes=self._globals_only)
        with self._lock:
            cached = self._cache.get(key)
            if cached is None:
                cached = self._compute(key, element)
                self._cache[key] = cached
                logger.debug(f"Resolved schema for '{key}': {len(cached.attributes)} attributes")
        return cached

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()
