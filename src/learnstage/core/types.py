"""Core type definitions."""

from typing import Any, NewType

# URL path for routing (e.g., "/lessons/track-a/intro")
# Distinct from filesystem Path to catch type mismatches
URLPath = NewType("URLPath", str)

# Route identifier: a filename slug or a breadcrumb segment sequence
RouteIdentifier = str | tuple[str, ...]

# Front matter values after normalization (JSON-serializable)
JSONValue = Any
