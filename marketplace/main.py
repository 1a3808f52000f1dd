import logging

from fastapi import FastAPI

from marketplace.api.exception_handlers import register_exception_handlers
from marketplace.api.v1.router import api_router
from marketplace.core.config import settings
from marketplace.services.marketplace import new_marketplace_from_config
from marketplace.services.profile import SqlProfileService
from marketplace.services.rule_type import SqlRuleTypeService

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI()

# Fails fast on an invalid marketplace configuration
app.state.marketplace = new_marketplace_from_config(
    settings.marketplace,
    profiles=SqlProfileService(),
    rules=SqlRuleTypeService(),
)

register_exception_handlers(app)
app.include_router(api_router, prefix="/api/v1")


@app.get("/health")
def health():
    return {"status": "ok"}
