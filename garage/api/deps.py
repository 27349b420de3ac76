from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request

from garage.services.catalog import CatalogStore
from garage.services.sponsors import SponsorDirectory
from garage.services.teams import TeamService

ADMIN = "ADMIN"
ENGINEER = "ENGINEER"


@dataclass
class Identity:
    """Who is calling. Issued by the auth layer; only used here for allow-lists."""
    user_id: str
    role: str


def get_identity(x_user_id: Optional[str] = Header(None), x_user_role: Optional[str] = Header(None)) -> Identity:
    if not x_user_id or not x_user_role:
        raise HTTPException(401, "Authentication required")
    return Identity(user_id=x_user_id, role=x_user_role.upper())


def require_role(*roles: str):
    def checker(identity: Identity = Depends(get_identity)) -> Identity:
        if identity.role not in roles:
            raise HTTPException(403, "Insufficient permissions")
        return identity
    return checker


def get_team_service(request: Request) -> TeamService:
    return request.app.state.services.teams


def get_catalog(request: Request) -> CatalogStore:
    return request.app.state.services.catalog


def get_sponsor_directory(request: Request) -> SponsorDirectory:
    return request.app.state.services.sponsors
