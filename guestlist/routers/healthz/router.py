import logging

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from guestlist.config.database import async_session_manager

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthCheckResponse(BaseModel):
    status: str
    database: str
    version: str = "0.1.0"


async def database_is_reachable() -> bool:
    try:
        async with async_session_manager(auto_commit=False) as session:
            await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning(f"Health check could not reach the database: {e}")
        return False
    return True


@router.get("/", response_model=HealthCheckResponse)
async def health_check(
    response: Response,
    database_ok: bool = Depends(database_is_reachable),
) -> HealthCheckResponse:
    """
    Health check endpoint to verify the API and its database are up.
    Answers 503 while the database is unreachable.
    """
    if not database_ok:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthCheckResponse(status="degraded", database="unavailable")
    return HealthCheckResponse(status="healthy", database="ok")
