# slotbook/main.py

from contextlib import asynccontextmanager

from fastapi import FastAPI

from slotbook.config import get_settings
from slotbook.db import create_db_and_tables
from slotbook.logging_config import setup_logging
from slotbook.routers import appointments_routes, businesses_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(get_settings().LOG_LEVEL)
    create_db_and_tables()
    yield


app = FastAPI(title="slotbook", lifespan=lifespan)

app.include_router(businesses_routes.router)
app.include_router(appointments_routes.router)


@app.get("/health")
def health_check():
    return {"status": "ok"}
