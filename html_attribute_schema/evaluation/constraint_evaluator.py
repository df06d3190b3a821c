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

"""Check literal attribute values against declared constraints.

``evaluate`` never raises: a value of an unexpected type is a violation.
Token-set constraints need an :class:`EvaluationContext` carrying the
schema table and the host tag; without one every token is unknown.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..models.constraints import (
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
from ..models.schema_table import SchemaTable, normalize_name
from ..utils.value_types import parse_finite_number, split_tokens


INVALID_VALUE = "invalid-value"
UNKNOWN_TOKEN = "unknown-token"
HOST_MISMATCH = "host-mismatch"


@dataclass(frozen=True)
class Violation:
    reason: str
    kind: str = INVALID_VALUE
    allowed_values: Optional[Tuple[str, ...]] = None
    token: Optional[str] = None


@dataclass(frozen=True)
class EvaluationResult:
    violations: Tuple[Violation, ...] = ()

    @property
    def satisfied(self) -> bool:
        return not self.violations


SATISFIED = EvaluationResult()


@dataclass(frozen=True)
class EvaluationContext:
    table: Optional[SchemaTable] = None
    host_tag: Optional[str] = None
    case_sensitive_tokens: bool = True


def _violation(reason: str, allowed=None, **kwargs) -> EvaluationResult:
    allowed_values = tuple(sorted(allowed)) if allowed is not None else None
    return EvaluationResult((Violation(reason=reason, allowed_values=allowed_values, **kwargs),))


def _show(value: Any) -> str:
    if isinstance(value, str):
        return f"'{value}'"
    return f"{value!r} ({type(value).__name__})"


def _free_string(constraint: FreeString, value: Any, context: EvaluationContext) -> EvaluationResult:
    if isinstance(value, str):
        return SATISFIED
    return _violation(f"Expected a string, got {_show(value)}")


def _any_value(constraint: AnyValue, value: Any, context: EvaluationContext) -> EvaluationResult:
    return SATISFIED


def _boolean(constraint: Boolean, value: Any, context: EvaluationContext) -> EvaluationResult:
    if isinstance(value, bool):
        return SATISFIED
    return _violation(f"Expected a boolean (presence-only) attribute, got {_show(value)}")


def _booleanish(constraint: BooleanishString, value: Any, context: EvaluationContext) -> EvaluationResult:
    if isinstance(value, bool) or value in ("true", "false"):
        return SATISFIED
    return _violation(f"Invalid value {_show(value)}, expected 'true' or 'false'", allowed=("true", "false"))


def _enum(constraint: Enum, value: Any, context: EvaluationContext) -> EvaluationResult:
    if isinstance(value, str) and value in constraint.values:
        return SATISFIED
    return _violation(
        f"Invalid value {_show(value)}, expected one of: {constraint.describe()}",
        allowed=constraint.values,
    )


def _number(constraint: Number, value: Any, context: EvaluationContext) -> EvaluationResult:
    if parse_finite_number(value) is not None:
        return SATISFIED
    return _violation(f"Invalid value {_show(value)}, expected a finite number")


def _token_set(constraint: ClosedTokenSet, value: Any, context: EvaluationContext) -> EvaluationResult:
    if not isinstance(value, str):
        return _violation(f"Expected a space-separated token list, got {_show(value)}")

    vocabulary = context.table.lookup_vocabulary(constraint.name) if context.table is not None else None
    host = normalize_name(context.host_tag) if context.host_tag is not None else None
    violations: List[Violation] = []
    reported = set()

    for token in split_tokens(value):
        if token in reported:
            continue
        entry = vocabulary.lookup(token, case_sensitive=context.case_sensitive_tokens) if vocabulary else None
        if entry is None:
            reported.add(token)
            allowed = vocabulary.tokens_for_host(host) if vocabulary and host else None
            violations.append(Violation(
                reason=f"Unrecognized token '{token}' in vocabulary '{constraint.name}'",
                kind=UNKNOWN_TOKEN,
                allowed_values=tuple(sorted(allowed)) if allowed is not None else None,
                token=token,
            ))
        elif host is not None and not entry.allows_host(host):
            reported.add(token)
            violations.append(Violation(
                reason=(
                    f"Token '{token}' is not allowed on <{host}>; "
                    f"allowed on: {', '.join(f'<{h}>' for h in sorted(entry.allowed_hosts))}"
                ),
                kind=HOST_MISMATCH,
                allowed_values=tuple(sorted(entry.allowed_hosts)),
                token=token,
            ))

    return EvaluationResult(tuple(violations))


def _any_of(constraint: AnyOf, value: Any, context: EvaluationContext) -> EvaluationResult:
    allowed = set()
    enumerable = True
    for option in constraint.options:
        result = evaluate(option, value, context)
        if result.satisfied:
            return SATISFIED
        for violation in result.violations:
            if violation.allowed_values is None:
                enumerable = False
            else:
                allowed.update(violation.allowed_values)
    return _violation(
        f"Invalid value {_show(value)}, expected {constraint.describe()}",
        allowed=allowed if enumerable else None,
    )


_EVALUATORS: Dict[type, Callable[[Any, Any, EvaluationContext], EvaluationResult]] = {
    FreeString: _free_string,
    AnyValue: _any_value,
    Boolean: _boolean,
    BooleanishString: _booleanish,
    Enum: _enum,
    Number: _number,
    ClosedTokenSet: _token_set,
    AnyOf: _any_of,
}


def evaluate(constraint: Constraint, value: Any, context: Optional[EvaluationContext] = None) -> EvaluationResult:
    """Decide whether *value* satisfies *constraint*."""
    handler = _EVALUATORS.get(type(constraint))
    if handler is None:
        return _violation(f"Unsupported constraint {constraint!r}")
    return handler(constraint, value, context or EvaluationContext())
