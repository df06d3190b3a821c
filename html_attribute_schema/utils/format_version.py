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


"""The ``html_attribute_schema_format`` field of schema data files.

Files must share the package's major version. A newer minor version still
loads, with a warning, since unknown additions are ignored by the loader.
"""

import logging
import re
from typing import Optional, Tuple

from .. import SCHEMA_FORMAT_VERSION
from ..exceptions import FormatVersionError

logger = logging.getLogger(__name__)

FORMAT_FIELD = "html_attribute_schema_format"

Version = Tuple[int, int, int]

_VERSION_RE = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)$")


def parse_format_version(raw) -> Version:
    """Parse ``MAJOR.MINOR.PATCH`` (an optional ``v`` prefix is allowed)."""
    match = _VERSION_RE.match(raw.strip()) if isinstance(raw, str) else None
    if match is None:
        raise FormatVersionError(f"Invalid {FORMAT_FIELD} value {raw!r}, expected e.g. '{SCHEMA_FORMAT_VERSION}'")
    return int(match.group(1)), int(match.group(2)), int(match.group(3))


def format_version_str(version: Version) -> str:
    return ".".join(str(part) for part in version)


def check_format_version(raw: Optional[str], source: str = "<data>") -> Optional[str]:
    """Return the normalized version a data file declares, or None if it declares none.

    Raises:
        FormatVersionError: If the version is malformed or its major differs.
    """
    if raw is None:
        logger.warning(f"{source} has no '{FORMAT_FIELD}' field; assuming {SCHEMA_FORMAT_VERSION}")
        return None

    try:
        declared = parse_format_version(raw)
    except FormatVersionError as exc:
        raise FormatVersionError(f"{source}: {exc}") from exc
    supported = parse_format_version(SCHEMA_FORMAT_VERSION)
    if declared[0] != supported[0]:
        raise FormatVersionError(
            f"{source} declares format {format_version_str(declared)}, "
            f"but only major version {supported[0]} is supported"
        )
    if declared[1] > supported[1]:
        logger.warning(
            f"{source} declares format {format_version_str(declared)}, newer than {SCHEMA_FORMAT_VERSION}; "
            f"fields it adds may fail validation"
        )
    return format_version_str(declared)
