"""
YAML codec shared by rule files and policy definitions.

Reads a single YAML document into a mapping and writes mappings back while
keeping the key order of the source document.
"""

from typing import Any, Dict, Type

import yaml


def load_yaml_mapping(text: str, error_cls: Type[Exception], what: str = "document") -> Dict[Any, Any]:
    """
    Parse YAML text that must hold a mapping at the top level.

    Args:
        text: Raw YAML content
        error_cls: Exception raised for any structural problem
        what: Human readable name used in error messages

    Returns:
        The parsed mapping, in document order

    Raises:
        error_cls: If the text is empty, is not valid YAML or is not a mapping
    """
    if not text or not text.strip():
        raise error_cls(f"{what} is empty or contains only whitespace")

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise error_cls(f"YAML syntax error in {what}: {e}") from e

    if not isinstance(data, dict):
        raise error_cls(
            f"{what} must contain a YAML dictionary, got {type(data).__name__}"
        )

    return data


def dump_yaml(data: Dict[Any, Any], error_cls: Type[Exception], what: str = "document") -> str:
    """Render a mapping as block-style YAML without reordering keys."""
    try:
        return yaml.safe_dump(
            data,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
        )
    except yaml.YAMLError as e:
        raise error_cls(f"Cannot serialize {what}: {e}") from e
