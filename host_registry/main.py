import logging

from fastapi import FastAPI

from .api import health, hosts
from .config import get_settings

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Host Registry")

app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(hosts.router, prefix="/hosts", tags=["hosts"])
