# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""YAML reference data loading.

Reference data such as the technique catalog ships as YAML documents
whose root is a mapping of named sections. load_yaml reads one document
and load_yaml_entries pulls the list of records out of one section.

Example:
    >>> entries = load_yaml_entries(Path("techniques.yaml"), "techniques")
    >>> entries[0]["id"]
    'box_breathing'
"""

from pathlib import Path
from typing import Any

import yaml


class YAMLLoadError(Exception):
    """Raised when a YAML document cannot be read, parsed or has the wrong shape."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load YAML file '{path}': {reason}")


def load_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML document whose root is a mapping.

    Args:
        path: Document to read.

    Returns:
        The parsed mapping. An empty document gives an empty dict.

    Raises:
        YAMLLoadError: If the file is missing or unreadable, the YAML is
            invalid, or the root is not a mapping.
    """
    if not path.is_file():
        raise YAMLLoadError(path, "Path is not a file" if path.exists() else "File does not exist")

    try:
        parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise YAMLLoadError(path, f"Cannot read file: {e}") from e
    except yaml.YAMLError as e:
        raise YAMLLoadError(path, f"Invalid YAML syntax: {e}") from e

    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise YAMLLoadError(path, f"YAML root must be a mapping, got {type(parsed).__name__}")
    return parsed


def load_yaml_entries(path: Path, section: str) -> list[dict[str, Any]]:
    """Read the records listed under one root key of a YAML document.

    Args:
        path: Document to read.
        section: Root key holding the records.

    Returns:
        The records, in file order.

    Raises:
        YAMLLoadError: If load_yaml fails, the section is missing or
            empty, or a record is not a mapping.
    """
    entries = load_yaml(path).get(section)
    if not isinstance(entries, list) or not entries:
        raise YAMLLoadError(path, f"'{section}' must be a non-empty list")

    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise YAMLLoadError(path, f"'{section}' entry {index} must be a mapping")
    return entries
