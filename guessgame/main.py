import logging
import os

from fastapi import FastAPI

from guessgame.api.routes import router

# Configure logging
logging.basicConfig(level=os.environ.get("GUESSGAME_LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

app = FastAPI(title="guess-number", version="0.1.0")
app.include_router(router)


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "guess-number", "version": "0.1.0"}
