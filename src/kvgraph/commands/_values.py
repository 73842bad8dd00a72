"""Command-line value parsing shared by the element and find commands."""

from __future__ import annotations

import json
from typing import Any

import click


def parse_value(text: str) -> Any:
    """Parse *text* as a JSON literal, falling back to the plain string.

    ``42`` is an int, ``true`` a bool, ``"42"`` and ``hello`` are strings.
    JSON ``null`` is rejected since property values can not be null.
    """
    try:
        value = json.loads(text)
    except ValueError:
        return text
    if value is None:
        raise click.BadParameter("null is not a valid property value")
    return value


def parse_properties(pairs: tuple[str, ...]) -> dict[str, Any]:
    """Turn repeated ``-p key=value`` options into a property dict."""
    properties: dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            msg = f"Expected KEY=VALUE, got {pair!r}"
            raise click.BadParameter(msg, param_hint="--property")
        properties[key] = parse_value(raw)
    return properties


KIND_CHOICE = click.Choice(["vertex", "edge"], case_sensitive=False)
