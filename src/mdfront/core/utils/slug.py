"""Slug and path-identity helpers for matching documents that describe the same page"""

import re
from pathlib import PurePath


BUNDLE_INDEX_NAMES = {'index', '_index'}


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated URL-safe slug."""
    text = text.lower()
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-')


def path_identity(source: str) -> str:
    """Slugified source path without extension; 'about/index.md' and 'about.md' both map to 'about'."""
    path = PurePath(source.replace('\\', '/')).with_suffix('')
    if path.name in BUNDLE_INDEX_NAMES and len(path.parts) > 1:
        path = path.parent
    return '/'.join(s for s in (slugify(p) for p in path.parts) if s)
