"""
Store record model.

The content store answers in two shapes depending on its API version: flat
entries (``{"id": 1, "documentId": "abc", "slug": ...}``) and wrapped entries
(``{"id": 1, "attributes": {...}}``). The store client converts both into
StoreRecord so nothing further inward has to care.
"""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field


class StoreRecord(BaseModel):
    """
    A single entry fetched from the content store.
    """

    id: Optional[Union[int, str]] = Field(
        default=None,
        description="Numeric (or string) primary key of the entry"
    )

    document_id: Optional[str] = Field(
        default=None,
        description="Stable document identifier exposed by newer store versions"
    )

    attributes: Dict[str, Any] = Field(
        default_factory=dict,
        description="Entry fields, unwrapped from any 'attributes' envelope"
    )

    @property
    def entry_id(self) -> Optional[Union[int, str]]:
        """Identifier to use in update URLs: the document id when present, else the id."""
        if self.document_id:
            return self.document_id
        return self.id

    def get(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)

    @classmethod
    def from_entry(cls, entry: Dict[str, Any]) -> "StoreRecord":
        """
        Build a record from either response shape.

        Args:
            entry: One element of a response's ``data`` member

        Returns:
            The normalized record
        """
        wrapped = entry.get("attributes")
        attributes = dict(wrapped) if isinstance(wrapped, dict) else dict(entry)
        document_id = entry.get("documentId") or attributes.get("documentId")
        return cls(
            id=entry.get("id"),
            document_id=str(document_id) if document_id else None,
            attributes=attributes,
        )
