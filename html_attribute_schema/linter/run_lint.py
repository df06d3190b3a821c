#!/usr/bin/env python3
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

"""CLI entry point for linting attribute request files."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

from ..config import ValidatorConfig, load_config
from ..exceptions import SchemaError
from ..models.schema_loader import load_schema_table
from ..utils.logging_utils import configure_split_stream_logging, level_from_name
from . import lint_files, LintResult
from .validator import Validator

logger = logging.getLogger(__name__)

REQUEST_EXTENSIONS = ['.attrs.yaml', '.attrs.yml', '.attrs.json']
EXPLICIT_SUFFIXES = {'.yaml', '.yml', '.json'}


def find_request_files(paths: List[str]) -> List[Path]:
    """Find request files in the given paths.

    Directories are searched recursively for ``*.attrs.yaml``/``.yml``/``.json``;
    files given explicitly only need a YAML or JSON suffix.
    """
    request_files = []

    for path_str in paths:
        path = Path(path_str)

        if not path.exists():
            logger.warning(f"Path does not exist: {path}")
            continue

        if path.is_file():
            if path.suffix in EXPLICIT_SUFFIXES:
                request_files.append(path)
            else:
                logger.warning(f"File is not YAML or JSON: {path}")
        elif path.is_dir():
            for ext in REQUEST_EXTENSIONS:
                request_files.extend(path.rglob(f'*{ext}'))
        else:
            logger.warning(f"Path is neither file nor directory: {path}")

    return sorted(set(request_files))


def _print_human(results: List[LintResult], show_info: bool) -> None:
    for result in results:
        infos = result.infos if show_info else []
        if not (result.errors or result.warnings or infos):
            continue
        print(f"\n{result.file_path}:")
        for kind, entries in (("ERROR", result.errors), ("WARNING", result.warnings), ("INFO", infos)):
            for entry in entries:
                line_info = f":{entry['line']}" if 'line' in entry else ""
                code = f" [{entry['code']}]" if 'code' in entry else ""
                print(f"  {kind}{line_info}{code}: {entry['message']}")


def main(argv: List[str] | None = None) -> None:
    """Main entry point for the linter CLI."""
    parser = argparse.ArgumentParser(
        description='Validate HTML attribute requests against the attribute schema',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        'paths',
        nargs='*',
        default=None,
        help='Request files or directories to lint (default: current directory)',
    )
    parser.add_argument(
        '--format',
        choices=['human', 'json', 'github-actions'],
        default='human',
        help='Output format (default: human)',
    )
    parser.add_argument('--config', help='Validator configuration YAML file')
    parser.add_argument('--schema', help='Schema data YAML file (default: packaged HTML table)')
    parser.add_argument('--show-info', action='store_true', help='Also print informational diagnostics')
    parser.add_argument('--log-level', default=None, help='Logging level (default: INFO, WARNING for non-human formats)')

    args = parser.parse_args(argv)

    default_level = logging.INFO if args.format == 'human' else logging.WARNING
    configure_split_stream_logging(level=level_from_name(args.log_level, default_level))

    if not args.paths:
        args.paths = ['.']

    try:
        config = load_config(args.config) if args.config else ValidatorConfig()
        table = load_schema_table(args.schema, config=config)
        validator = Validator(table, config=config)
    except SchemaError as e:
        logger.error(str(e))
        sys.exit(2)

    request_files = find_request_files(args.paths)
    if not request_files:
        logger.error("No request files found.")
        sys.exit(1)

    results = lint_files(request_files, validator)

    if args.format == 'json':
        output = {
            'files': len(results),
            'errors': sum(len(r.errors) for r in results),
            'warnings': sum(len(r.warnings) for r in results),
            'infos': sum(len(r.infos) for r in results),
            'results': [
                {
                    'file': str(r.file_path),
                    'errors': r.errors,
                    'warnings': r.warnings,
                    'infos': r.infos,
                }
                for r in results
            ]
        }
        print(json.dumps(output, indent=2))
    elif args.format == 'github-actions':
        for result in results:
            for error in result.errors:
                print(f"::error file={result.file_path},line={error.get('line', 1)}::{error['message']}")
            for warning in result.warnings:
                print(f"::warning file={result.file_path},line={warning.get('line', 1)}::{warning['message']}")
            if args.show_info:
                for info in result.infos:
                    print(f"::notice file={result.file_path},line={info.get('line', 1)}::{info['message']}")
    else:
        _print_human(results, args.show_info)

    if any(r.errors or r.warnings for r in results):
        sys.exit(1)
    if args.format == 'human':
        print("Lint succeeded with no warnings.")
    sys.exit(0)


if __name__ == '__main__':
    main()
