"""
Tag resolution for article imports.

Tag names from the input are resolved to ids in the tag collection, creating
missing tags on the fly. Tags are identified by their slug, so resolving the
same name twice never creates a duplicate.
"""

import logging
from typing import Dict, List, Optional, Union

from ..models import RunOptions, TagPayload
from ..normalize.payloads import apply_publish_marker
from ..normalize.text import slugify
from ..schemas import schema_registry
from .client import StoreClient


class TagResolver:
    """
    Resolves tag names to store ids, creating missing tags unless in a dry run.
    """

    def __init__(self, client: StoreClient, options: RunOptions, endpoint: Optional[str] = None):
        """
        Initialize the resolver.

        Args:
            client: Store client
            options: Run options (dry_run, force_publish)
            endpoint: Tag collection endpoint (defaults to the registered 'tags' schema)
        """
        self.client = client
        self.options = options
        self.endpoint = endpoint or schema_registry.get_schema("tags").endpoint
        self._cache: Dict[str, Union[int, str]] = {}

    def resolve(self, name: str) -> Optional[Union[int, str]]:
        """
        Resolve one tag name to its id.

        Returns:
            The tag id, or None when the name has no usable slug or the tag
            does not exist yet and this is a dry run
        """
        slug = slugify(name)
        if not slug:
            return None
        if slug in self._cache:
            return self._cache[slug]

        existing = self.client.find_one(self.endpoint, "slug", slug)
        if existing is None and not self.options.dry_run:
            payload = TagPayload(name=name.strip(), slug=slug)
            if self.options.force_publish:
                apply_publish_marker(payload, self.options)
            existing = self.client.create(self.endpoint, payload.to_payload())
            logging.info(f"[tag] created '{slug}'")

        if existing is None or existing.id is None:
            return None
        self._cache[slug] = existing.id
        return existing.id

    def ensure_tag_ids(self, names: List[str]) -> List[Union[int, str]]:
        """
        Resolve a list of tag names to ids, in input order.

        Args:
            names: Tag names

        Returns:
            Ids of the tags that exist (or were created)
        """
        ids: List[Union[int, str]] = []
        for name in names:
            if not str(name).strip():
                continue
            tag_id = self.resolve(str(name))
            if tag_id is not None and tag_id not in ids:
                ids.append(tag_id)
        return ids
