"""Pydantic contracts for entries of the Terraform JSON plan format.

Only the fields assertions commonly reach for are declared; everything else is
retained through ``extra="allow"`` so newer plan formats keep validating.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ChangeContract(BaseModel):
    """Planned change for a single resource or output."""

    model_config = ConfigDict(extra="allow")

    actions: list[str] = Field(default_factory=list)
    before: Any = None
    after: Any = None
    after_unknown: Any = None
    before_sensitive: Any = None
    after_sensitive: Any = None

    @property
    def is_no_op(self) -> bool:
        return self.actions == ["no-op"]

    @property
    def is_create(self) -> bool:
        return self.actions == ["create"]

    @property
    def is_update(self) -> bool:
        return self.actions == ["update"]

    @property
    def is_delete(self) -> bool:
        return self.actions == ["delete"]

    @property
    def is_replace(self) -> bool:
        return sorted(self.actions) == ["create", "delete"]


class ResourceChangeContract(BaseModel):
    """Entry of the ``resource_changes`` list."""

    model_config = ConfigDict(extra="allow")

    address: str
    type: str
    name: str
    mode: str = "managed"
    index: Any = None
    module_address: str | None = None
    provider_name: str | None = None
    change: ChangeContract = Field(default_factory=ChangeContract)


__all__ = ["ChangeContract", "ResourceChangeContract"]
