"""Machine-readable header blocks embedded in newer report templates.

Two carriers exist: YAML front matter between ``---`` fences at the top of the
document, and a JSON object inside an ``<!-- REPORT_DATA ... -->`` comment.
Both are optional; when present their values take priority over the prose.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field

import yaml

logger = logging.getLogger(__name__)

_YAML_BLOCK = re.compile(r"\A\ufeff?---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)
_JSON_COMMENT = re.compile(r"<!--\s*REPORT_DATA\s*(.*?)-->", re.DOTALL)


@dataclass
class FrontMatter:
    data: dict = field(default_factory=dict)
    body: str = ""
    error: str | None = None

    def get(self, *keys: str):
        """First non-empty value among ``keys``."""
        for key in keys:
            value = self.data.get(key)
            if value not in (None, "", [], {}):
                return value
        return None

    def __bool__(self) -> bool:
        return bool(self.data)


def read_front_matter(text: str) -> FrontMatter:
    """Split ``text`` into its header data and markdown body.

    Malformed headers are reported through ``error`` and the text is handed
    back untouched so prose extraction can still run.
    """
    match = _YAML_BLOCK.match(text)
    if match:
        try:
            data = yaml.safe_load(match.group(1))
        except yaml.YAMLError as e:
            logger.debug(f"Front matter is not valid YAML: {e}")
            return FrontMatter(body=text, error="Failed to parse YAML front matter")
        if isinstance(data, dict) and data:
            return FrontMatter(data=data, body=text[match.end():])
        # a leading horizontal rule, not a header block
        return FrontMatter(body=text)

    comment = _JSON_COMMENT.search(text)
    if comment:
        body = (text[:comment.start()] + text[comment.end():]).strip()
        try:
            data = json.loads(comment.group(1).strip())
        except json.JSONDecodeError as e:
            logger.debug(f"REPORT_DATA comment is not valid JSON: {e}")
            return FrontMatter(body=body, error="Found REPORT_DATA comment but failed to parse JSON")
        if isinstance(data, dict):
            return FrontMatter(data=data, body=body)
        return FrontMatter(body=body, error="REPORT_DATA comment is not a JSON object")

    return FrontMatter(body=text)
