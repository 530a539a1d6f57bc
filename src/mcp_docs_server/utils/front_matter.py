"""YAML front matter parsing for markdown documents.

Uses '---' delimiters (the Jekyll / gray-matter convention) to separate YAML
metadata from the markdown body.

Example markdown with front matter:
    ---
    title: Streamable HTTP transport
    tags: [transport, http]
    ---
    # Streamable HTTP

    The streamable HTTP transport replaces...
"""

import re
from typing import Any

import yaml


DELIMITER = "---"

_FRONT_MATTER_PATTERN = re.compile(
    rf"^\ufeff?{re.escape(DELIMITER)}[ \t]*\r?\n(.*?)\r?\n{re.escape(DELIMITER)}[ \t]*(?:\r?\n|$)",
    re.DOTALL,
)


def parse_front_matter(content: str) -> tuple[dict[str, Any], str]:
    """Split markdown content into (metadata, body).

    Returns:
        Tuple of (front_matter_dict, markdown_content). Content without front
        matter returns (empty dict, original content).

    Raises:
        yaml.YAMLError: If the front matter block is not valid YAML.

    Example:
        >>> metadata, body = parse_front_matter("---\\ntitle: OAuth\\n---\\n# OAuth flow")
        >>> metadata["title"]
        'OAuth'
        >>> body
        '# OAuth flow'
    """
    match = _FRONT_MATTER_PATTERN.match(content)
    if not match:
        return {}, content

    metadata = yaml.safe_load(match.group(1)) or {}

    # Scalars or lists are not metadata; treat the whole file as body
    if not isinstance(metadata, dict):
        return {}, content

    return metadata, content[match.end() :]


def coerce_tags(raw: Any) -> tuple[str, ...]:
    """Normalize a front matter `tags` value to a tuple of strings."""
    if raw is None:
        return ()
    if isinstance(raw, str):
        return (raw,) if raw.strip() else ()
    if isinstance(raw, (list, tuple)):
        return tuple(str(tag) for tag in raw if tag is not None and str(tag).strip())
    return (str(raw),)
