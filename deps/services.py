from fastapi import Request

from curriculum import CurriculumCatalog
from gemini_client import TextModel
from store import ProblemStore

# Process-scoped services are built once in main.py and parked on app.state;
# routes reach them through these so tests can swap them via dependency_overrides.


def get_catalog(request: Request) -> CurriculumCatalog:
    return request.app.state.catalog


def get_model_client(request: Request) -> TextModel:
    return request.app.state.model_client


def get_store(request: Request) -> ProblemStore:
    return request.app.state.store
