from __future__ import annotations

import re

_TAG_PREFIX_RE = re.compile(r"^v")


def version_from_tag(tag: str) -> str:
    """Strip one leading "v" from a release tag: v1.2.3 -> 1.2.3."""
    return _TAG_PREFIX_RE.sub("", tag, count=1)
