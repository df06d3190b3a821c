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

"""Value constraints an attribute may declare.

Each constraint is a small frozen dataclass; ``Constraint`` is their union.
Evaluation lives in :mod:`html_attribute_schema.evaluation.constraint_evaluator`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Tuple, Union


@dataclass(frozen=True)
class FreeString:
    """Any string, including the empty string."""

    def describe(self) -> str:
        return "string"


@dataclass(frozen=True)
class AnyValue:
    """Any value of any type."""

    def describe(self) -> str:
        return "any value"


@dataclass(frozen=True)
class Boolean:
    """A genuine boolean; presence-only attributes normalize to ``True``."""

    def describe(self) -> str:
        return "boolean"


@dataclass(frozen=True)
class BooleanishString:
    """A boolean, or the exact strings ``"true"`` / ``"false"``."""

    def describe(self) -> str:
        return "'true' | 'false' | boolean"


@dataclass(frozen=True)
class Enum:
    values: FrozenSet[str]

    def describe(self) -> str:
        return " | ".join(f"'{v}'" for v in sorted(self.values))


@dataclass(frozen=True)
class Number:
    def describe(self) -> str:
        return "number"


@dataclass(frozen=True)
class ClosedTokenSet:
    """Whitespace-separated tokens drawn from the vocabulary called ``name``."""

    name: str

    def describe(self) -> str:
        return f"tokens of '{self.name}'"


@dataclass(frozen=True)
class AnyOf:
    options: Tuple["Constraint", ...]

    def describe(self) -> str:
        return " | ".join(opt.describe() for opt in self.options)


Constraint = Union[FreeString, AnyValue, Boolean, BooleanishString, Enum, Number, ClosedTokenSet, AnyOf]


def is_boolean_constraint(constraint: Constraint) -> bool:
    """True for the plain ``Boolean`` kind only; presence normalization depends on it."""
    return isinstance(constraint, Boolean)
