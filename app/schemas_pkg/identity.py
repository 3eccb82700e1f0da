from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict


class IdentityUser(BaseModel):
    """User payload returned by the identity backend's profile endpoint."""
    model_config = ConfigDict(extra="allow")

    id: Optional[Union[int, str]] = None
    email: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[Union[str, int]] = None

    @property
    def external_id(self) -> str:
        return "" if self.id is None else str(self.id)


@dataclass
class IdentityResult:
    authenticated: bool = False
    identity: Optional[IdentityUser] = None

    @classmethod
    def anonymous(cls) -> "IdentityResult":
        return cls(authenticated=False, identity=None)

    @property
    def external_id(self) -> str:
        return self.identity.external_id if self.identity else ""
