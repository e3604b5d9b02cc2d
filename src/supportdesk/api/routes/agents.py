"""Agent catalog routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from supportdesk.agent.coordinator import AgentCoordinator
from supportdesk.api.dependencies import get_coordinator
from supportdesk.api.schemas import APIResponse
from supportdesk.constants import Category

router = APIRouter(prefix="/api/agents", tags=["agents"])


@router.get("")
async def list_agents(
    coordinator: AgentCoordinator = Depends(get_coordinator),
) -> APIResponse:
    """List every agent the desk can dispatch to."""
    return APIResponse(
        success=True,
        data=[a.model_dump() for a in coordinator.list_agents()],
    )


@router.get("/{agent_type}/capabilities")
async def get_agent_capabilities(
    agent_type: str,
    response: Response,
    coordinator: AgentCoordinator = Depends(get_coordinator),
) -> APIResponse:
    """Describe one agent and the data tools it can call."""
    try:
        category = Category(agent_type.upper())
    except ValueError:
        response.status_code = 400
        return APIResponse(
            success=False, error=f"Invalid agent type: {agent_type}"
        )
    return APIResponse(
        success=True,
        data=coordinator.get_agent_capabilities(category).model_dump(),
    )
