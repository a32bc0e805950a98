"""
Slug derivation for entry directory names.
"""

import logging
import re
from typing import Dict, Optional

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """
    Lower-case, collapse runs of non-alphanumerics to ``-``, strip ``-`` ends.

    >>> slugify("Bob Smith")
    'bob-smith'
    """
    return _NON_ALNUM.sub("-", str(text).lower()).strip("-")


class SlugAllocator:
    """
    Hands out unique slugs within one content type.

    The first title to claim a slug keeps it; later collisions get a numeric
    suffix (``-2``, ``-3``, ...). A title with no usable characters falls back
    to the slug of the entry id.
    """

    def __init__(self, content_type: Optional[str] = None):
        self.content_type = content_type
        self._owners: Dict[str, str] = {}

    def allocate(self, title: str, entry_id: str) -> str:
        base = slugify(title) or slugify(entry_id) or "entry"
        slug = base
        suffix = 2
        while slug in self._owners and self._owners[slug] != entry_id:
            slug = f"{base}-{suffix}"
            suffix += 1

        if slug != base:
            logging.warning(
                f"Slug collision in {self.content_type or 'content type'}: "
                f"'{title}' ({entry_id}) stored as '{slug}' "
                f"('{base}' belongs to {self._owners[base]})"
            )
        self._owners[slug] = entry_id
        return slug
