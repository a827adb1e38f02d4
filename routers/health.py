from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from curriculum import CurriculumCatalog
from db import engine
from deps.services import get_catalog
from errors import StorageError

router = APIRouter(prefix="/health", tags=["health"])


@router.get("/db")
def health_db():
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        raise StorageError(f"Database unreachable: {type(e).__name__}") from e
    return {"ok": True, "dialect": engine.dialect.name}


@router.get("/curriculum")
def health_curriculum(catalog: Annotated[CurriculumCatalog, Depends(get_catalog)]):
    # CatalogError from an unreadable file surfaces as the usual 500 envelope
    return {"ok": True, "topics": len(catalog.topics())}
