"""
Run options model.

RunOptions is the validated, fully-resolved set of switches for one command.
It is assembled by ConfigManager.run_options() from config.yaml, environment
variables and CLI flags.
"""

from typing import Literal, Optional, Union

from pydantic import BaseModel, Field, ValidationInfo, field_validator, model_validator

IMPORT_MODES = ("update", "skip")
SYNC_MODES = ("skip", "create")


class RunOptions(BaseModel):
    """
    Options shared by the import, sync and migrate commands.
    """

    operation: Literal["import", "sync", "migrate"] = Field(
        ...,
        description="Kind of run: seed import, sync from file, or in-place migration"
    )

    base_url: str = Field(
        default="http://localhost:1337",
        description="Content store base URL without trailing slash"
    )

    token: str = Field(
        default="",
        validate_default=True,
        description="Bearer token with create/update permissions"
    )

    upsert_mode: str = Field(
        default="update",
        description="update|skip for imports, skip|create for sync runs"
    )

    dry_run: bool = False
    force_publish: bool = False
    force_unpublish: bool = Field(
        default=False,
        description="Revert written entries to draft; honoured by imports only"
    )
    default_cover_image_id: Optional[Union[int, str]] = None
    only_when_empty: bool = True
    clear_legacy_content: bool = False

    page_size: int = Field(
        default=100,
        description="Page size for paginated reads, between 1 and 100"
    )

    key_filter: str = Field(
        default="",
        description="Restrict a migration to the entry with this natural key"
    )

    timeout: float = 30.0

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @field_validator("token")
    @classmethod
    def _require_token(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Missing STRAPI_TOKEN. Use a token with create/update permissions.")
        return value.strip()

    @field_validator("force_unpublish")
    @classmethod
    def _unpublish_imports_only(cls, value: bool, info: ValidationInfo) -> bool:
        return bool(value) and info.data.get("operation") == "import"

    @field_validator("upsert_mode")
    @classmethod
    def _lowercase_mode(cls, value: str) -> str:
        return value.strip().lower()

    @field_validator("page_size")
    @classmethod
    def _check_page_size(cls, value: int) -> int:
        if value < 1 or value > 100:
            raise ValueError("PAGE_SIZE must be a number between 1 and 100.")
        return value

    @model_validator(mode="after")
    def _check_mode_for_operation(self) -> "RunOptions":
        if self.operation == "import" and self.upsert_mode not in IMPORT_MODES:
            raise ValueError("Upsert mode must be either 'update' or 'skip'.")
        if self.operation == "sync" and self.upsert_mode not in SYNC_MODES:
            raise ValueError("Upsert mode must be either 'skip' or 'create'.")
        return self
