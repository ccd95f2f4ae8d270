"""
Dashboard Aggregator — Backend Descriptor
===========================================

What:  Static description of one upstream service (where it lives, how to
       authenticate against it, how the dashboard displays it).
When:  Built once at startup by Settings.backend_registry(); frozen afterwards.
"""

from typing import Optional

from pydantic import BaseModel, Field


class BackendDescriptor(BaseModel):
    key: str = Field(description="Registry key, also the slot name in the overview")
    name: str = Field(description="Display name")
    base_url: str = Field(description="Base URL every request path is joined onto")
    shared_secret: Optional[str] = Field(
        default=None,
        description="Sent as the `secret` query parameter on every call",
        repr=False,
    )
    icon: str = Field(default="")
    color: str = Field(default="#8E8E93")

    model_config = {"frozen": True}

    def display(self) -> dict:
        """Display metadata merged into every summary for this backend."""
        return {"name": self.name, "icon": self.icon, "color": self.color}
