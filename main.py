from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import asyncio

from config import get_settings, configure_logging
from api import games, rounds
from core.game_manager import get_game_manager
from core.scheduler import run_housekeeping

settings = get_settings()
configure_logging(settings)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: 啟動背景排程（隱藏回合結果、清除閒置遊戲）
    task = asyncio.create_task(run_housekeeping(get_game_manager(), settings))
    yield
    # Shutdown: 停止背景排程
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass


app = FastAPI(
    title="Sealed-Bid Auction Game API",
    description="Backend API for a multiplayer sealed-bid auction game",
    version="1.0.0",
    lifespan=lifespan
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(games.router)
app.include_router(rounds.router)


@app.get("/")
def root():
    return {"message": "Sealed-Bid Auction Game API", "status": "ok"}


@app.get("/health")
def health():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
