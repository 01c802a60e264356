"""
Input row model for contentloader.

Every importer converts its source format into Row objects so the
normalizers never need to know whether a record came from CSV or JSON.
"""

from typing import Any, Dict

from pydantic import BaseModel, Field


class Row(BaseModel):
    """
    One raw input record plus where it came from.
    """

    fields: Dict[str, Any] = Field(
        default_factory=dict,
        description="Field name to raw value (CSV strings or arbitrary JSON values)"
    )

    line: int = Field(
        ...,
        description="1-based line number (CSV) or array position (JSON) of the record"
    )

    def raw(self, *names: str) -> Any:
        """
        Return the first present, non-None value among the given field names.

        Args:
            names: Candidate field names, in order of preference

        Returns:
            The raw value, or None when none of the fields is set
        """
        for name in names:
            value = self.fields.get(name)
            if value is not None:
                return value
        return None

    def text(self, *names: str) -> str:
        """Like raw(), but coerced to a trimmed string."""
        value = self.raw(*names)
        if value is None:
            return ""
        return str(value).strip()
