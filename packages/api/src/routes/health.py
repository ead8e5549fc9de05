# This project was developed with assistance from AI tools.
"""Liveness and database readiness."""

from db import DatabaseService, get_db_service
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

router = APIRouter()


@router.get("/")
async def health(db_service: DatabaseService = Depends(get_db_service)) -> JSONResponse:
    """Report service and database status; 503 when the database is unreachable."""
    db_ok = await db_service.health_check()
    body = {"status": "ok" if db_ok else "degraded", "database": "ok" if db_ok else "unavailable"}
    return JSONResponse(status_code=200 if db_ok else 503, content=body)
