"""
Output format utilities for jrn CLI commands.

Provides functions to format data as JSON, JSONL and YAML.
"""

import json
from typing import Any, Dict, Iterable, Iterator

import yaml


def format_output(data: Iterable[Dict[str, Any]], format: str) -> Iterator[str]:
    """
    Format data according to the specified format.

    Args:
        data: Dictionaries to format
        format: Output format (json, jsonl, yaml)

    Yields:
        Formatted strings for output
    """
    if format == "jsonl":
        yield from format_jsonl(data)
    elif format == "json":
        yield from format_json(data)
    elif format == "yaml":
        yield from format_yaml(data)
    else:
        raise ValueError(f"Unknown format: {format}")


def format_jsonl(data: Iterable[Dict[str, Any]]) -> Iterator[str]:
    """Format data as JSON Lines (one JSON object per line)."""
    for item in data:
        yield json.dumps(item, ensure_ascii=False)


def format_json(data: Iterable[Dict[str, Any]]) -> Iterator[str]:
    """Format data as a single JSON array."""
    all_data = list(data)
    yield json.dumps(all_data, ensure_ascii=False, indent=2)


def format_yaml(data: Iterable[Dict[str, Any]]) -> Iterator[str]:
    """Format data as YAML."""
    all_data = list(data)
    if not all_data:
        return
    yield yaml.safe_dump(all_data, default_flow_style=False, allow_unicode=True, sort_keys=False).rstrip("\n")
