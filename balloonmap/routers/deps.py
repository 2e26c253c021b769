from fastapi import Request

from ..services.refresh import DashboardState

def get_state(request: Request) -> DashboardState:
    return request.app.state.dashboard
