from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from deps.services import get_store
from schemas.history import HistoryResponse, Pagination
from store import ProblemStore

router = APIRouter(tags=["history"])


@router.get("/api/problem-history", response_model=HistoryResponse)
def problem_history(
    store: Annotated[ProblemStore, Depends(get_store)],
    limit: int = 10,
    offset: int = 0,
):
    limit = max(1, min(limit, 100))
    offset = max(0, offset)

    sessions = store.list_history(limit=limit, offset=offset)
    return HistoryResponse(
        sessions=sessions,
        pagination=Pagination(limit=limit, offset=offset, has_more=len(sessions) == limit),
    )
