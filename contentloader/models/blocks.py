"""
Structured content block models.

A content block is one typed unit of a dynamic-zone field. On the wire each
block is a flat object tagged by ``__component`` (``<namespace>.<kind>``,
e.g. ``page.rich-text`` or ``article.list``).
"""

from typing import Any, ClassVar, Dict, List, Literal, Optional, Type

from pydantic import BaseModel, ConfigDict, Field


class ContentBlock(BaseModel):
    """
    Base class for all block variants.
    """

    model_config = ConfigDict(populate_by_name=True)

    kind: ClassVar[str] = ""

    component: str = Field(
        ...,
        alias="__component",
        description="Namespaced component identifier, e.g. 'page.section-heading'"
    )

    @classmethod
    def in_namespace(cls, namespace: str, **fields: Any) -> "ContentBlock":
        """
        Create a block whose component tag lives in the given namespace.

        Args:
            namespace: Component namespace ('page', 'article', ...)
            fields: Variant-specific attributes

        Returns:
            The new block
        """
        return cls(component=f"{namespace}.{cls.kind}", **fields)

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to the store's wire shape."""
        return self.model_dump(by_alias=True, exclude_none=True)


class SectionHeading(ContentBlock):
    kind: ClassVar[str] = "section-heading"

    text: str
    level: Literal["h1", "h2", "h3", "h4"] = "h2"


class RichText(ContentBlock):
    kind: ClassVar[str] = "rich-text"

    body: str


class ListBlock(ContentBlock):
    kind: ClassVar[str] = "list"

    list_style: Literal["ordered", "unordered"] = Field("unordered", alias="listStyle")
    items_text: str = Field(..., alias="itemsText")

    @property
    def items(self) -> List[str]:
        """Item texts without the '- ' prefix."""
        return [line[2:] if line.startswith("- ") else line for line in self.items_text.split("\n")]


class Callout(ContentBlock):
    kind: ClassVar[str] = "callout"

    title: Optional[str] = None
    body: str
    tone: str = "info"


class CallToAction(ContentBlock):
    kind: ClassVar[str] = "cta"

    label: str
    url: str
    style: str = "primary"


class PullQuote(ContentBlock):
    kind: ClassVar[str] = "pull-quote"

    text: str
    author: Optional[str] = None
    role: Optional[str] = None


BLOCK_TYPES: Dict[str, Type[ContentBlock]] = {
    block_type.kind: block_type
    for block_type in (SectionHeading, RichText, ListBlock, Callout, CallToAction, PullQuote)
}


def block_from_payload(data: Dict[str, Any]) -> ContentBlock:
    """
    Rebuild a typed block from its wire representation.

    Args:
        data: A block object as returned by the store

    Returns:
        The matching ContentBlock subclass instance

    Raises:
        ValueError: If the component kind is unknown
    """
    component = str(data.get("__component", ""))
    kind = component.split(".", 1)[-1]
    block_type = BLOCK_TYPES.get(kind)
    if block_type is None:
        raise ValueError(f"Unknown content block component: '{component}'")
    return block_type.model_validate(data)
