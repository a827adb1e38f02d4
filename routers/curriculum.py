from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Depends

from curriculum import CurriculumCatalog
from deps.services import get_catalog
from schemas.curriculum import CurriculumTopicsResponse

router = APIRouter(tags=["curriculum"])


@router.get("/api/curriculum-topics", response_model=CurriculumTopicsResponse)
def list_curriculum_topics(
    catalog: Annotated[CurriculumCatalog, Depends(get_catalog)],
    category: Optional[str] = None,
):
    topics = catalog.by_category(category) if category else catalog.topics()
    return CurriculumTopicsResponse(topics=topics)
