"""Liveness endpoint that also reports whether the user directory is reachable."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bastion import __version__
from bastion.core.config import Settings, get_settings
from bastion.core.database import check_db_connected, get_db
from bastion.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> HealthResponse:
    """Always 200 while the process is up; database is 'disconnected' during an outage."""
    return HealthResponse(
        version=__version__,
        environment=settings.APP_ENV,
        database="connected" if check_db_connected(db) else "disconnected",
    )
