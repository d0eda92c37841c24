import argparse
import logging
import uvicorn
from fastapi import FastAPI
from contextlib import asynccontextmanager

import sys
from pathlib import Path

# Add project root to path for package imports
base_dir = Path(__file__).parent
sys.path.insert(0, str(base_dir))

from db.database import init_db
from config import load_config
from routes import game, history, stats  # Import routers

# First-run init
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: init DB and config
    load_config()  # Ensures config exists
    init_db()
    yield
    game.reset_engine()

app = FastAPI(
    title="multidrill",
    description="Adaptive multiplication table trainer",
    lifespan=lifespan,
)

# Include routers
app.include_router(game.router, prefix="/game", tags=["game"])
app.include_router(history.router, prefix="/history", tags=["history"])
app.include_router(stats.router, prefix="/stats", tags=["stats"])

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="multidrill trainer")
    parser.add_argument("--init", action="store_true", help="Initialize DB and config")
    parser.add_argument("--dev", action="store_true", help="Run in dev mode with reload")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on")
    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.dev else logging.INFO)
    if args.init:
        load_config()  # Ensures config is copied if missing
        init_db()
        print("DB initialized and config copied to ~/.multidrill/")
        exit(0)
    # Run server
    uvicorn.run("main:app", host="127.0.0.1", port=args.port, reload=args.dev, log_level="info")
