from fastapi import APIRouter
from contracts.agent_api import AgentHealthResponse

router = APIRouter(prefix="/agent", tags=["health"])

@router.get("/health", response_model=AgentHealthResponse)
def health() -> AgentHealthResponse:
    return AgentHealthResponse(status="ok")
