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

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional


STRING_KINDS = {"string", "str", "free_string"}
ANY_KINDS = {"any"}
BOOL_KINDS = {"bool", "boolean"}
BOOLEANISH_KINDS = {"booleanish", "booleanish_string"}
ENUM_KINDS = {"enum"}
NUMBER_KINDS = {"number", "integer", "int", "float"}
TOKEN_SET_KINDS = {"tokens", "token_set", "closed_token_set"}
UNION_KINDS = {"any_of", "union"}

ALLOWED_CONSTRAINT_KINDS = (
    STRING_KINDS | ANY_KINDS | BOOL_KINDS | BOOLEANISH_KINDS | ENUM_KINDS
    | NUMBER_KINDS | TOKEN_SET_KINDS | UNION_KINDS
)

# HTML "ASCII whitespace": TAB, LF, FF, CR, SPACE.
ASCII_WHITESPACE = "\t\n\f\r "

# Plain ASCII decimal or exponent notation; no digit separators or Unicode digits.
_NUMBER_RE = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?")


def normalize_kind_name(kind_name: Any) -> Optional[str]:
    if kind_name is None:
        return None
    if isinstance(kind_name, str):
        return kind_name.strip().lower()
    return str(kind_name).strip().lower()


def is_supported_constraint_kind(kind_name: Optional[str]) -> bool:
    if not kind_name:
        return False
    return kind_name in ALLOWED_CONSTRAINT_KINDS


def split_tokens(value: str) -> list:
    """Split a token list on runs of ASCII whitespace, dropping empty tokens."""
    tokens = []
    current = []
    for ch in value:
        if ch in ASCII_WHITESPACE:
            if current:
                tokens.append("".join(current))
                current = []
        else:
            current.append(ch)
    if current:
        tokens.append("".join(current))
    return tokens


def parse_finite_number(value: Any) -> Optional[Decimal]:
    """Return *value* as a finite Decimal, or None if it is not one.

    ``bool`` is rejected even though it is an ``int`` subclass.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        try:
            dec = Decimal(value)
        except (InvalidOperation, ValueError):
            return None
        return dec if dec.is_finite() else None

    if isinstance(value, str):
        text = value.strip(ASCII_WHITESPACE)
        if not _NUMBER_RE.fullmatch(text):
            return None
        try:
            dec = Decimal(text)
        except InvalidOperation:
            return None
        return dec if dec.is_finite() else None

    return None
