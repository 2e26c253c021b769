import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .core.logging import setup_logging
from .routers import balloons, hazards
from .services.navigation import AdvisorySelection
from .services.refresh import DashboardState, build_loops

logger = logging.getLogger(__name__)


def new_state() -> DashboardState:
    return DashboardState(selection=AdvisorySelection(window_s=settings.selection_window_seconds))


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level)
    loops = build_loops(app.state.dashboard, settings)
    app.state.loops = loops
    for loop in loops:
        loop.start()
    logger.info("%s started (%s)", settings.app_name, settings.app_env)
    try:
        yield
    finally:
        for loop in loops:
            await loop.stop()


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.state.dashboard = new_state()
app.state.loops = []

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],      # tighten for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(balloons.router)
app.include_router(hazards.router)

@app.get("/")
def root():
    return {"name": settings.app_name, "env": settings.app_env, "message": "OK"}

@app.post("/refresh")
async def refresh(request: Request):
    loops = request.app.state.loops or build_loops(request.app.state.dashboard, settings)
    applied = await asyncio.gather(*(loop.run_once() for loop in loops))
    return {loop.name: ok for loop, ok in zip(loops, applied)}
