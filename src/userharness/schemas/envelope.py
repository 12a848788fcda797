"""Uniform JSON envelope returned by the user-management API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ResponseEnvelope(BaseModel):
    """Wire shape of every API response from the system under test.

    Equality is structural: a null field and an empty collection are
    different values, and ``messages`` is compared in order.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    success: bool = False
    code: int | None = None
    redirect_url: str | None = Field(default=None, alias="redirectUrl")
    messages: list[str] | None = None
    data: Any = None

    def to_json(self) -> str:
        """Serialize using wire field names."""
        return self.model_dump_json(by_alias=True)
