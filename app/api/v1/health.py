"""Health check endpoint: store connectivity and presence of the public store configuration."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.api.dependencies import SettingsDep, VulnerabilityStoreDep
from app.core.config import Settings
from app.schemas.errors import ErrorResponse
from app.schemas.health import ConfigPresence, HealthEnv, HealthResponse
from app.services.store_errors import StoreError

logger = logging.getLogger(__name__)

router = APIRouter()


def _presence(value: object) -> ConfigPresence:
    return "Set" if value else "Missing"


def config_presence(settings: Settings) -> HealthEnv:
    """Report whether the public store URL and anon key are configured."""
    key = settings.SUPABASE_ANON_KEY
    return HealthEnv(
        url=_presence(settings.SUPABASE_URL),
        key=_presence(key.get_secret_value() if key is not None else None),
    )


@router.get(
    "",
    response_model=HealthResponse,
    responses={500: {"model": ErrorResponse}},
)
def get_health(store: VulnerabilityStoreDep, settings: SettingsDep):
    """
    Count stored vulnerabilities to verify the store is reachable.
    Used by load balancers and monitoring.
    """
    logger.debug("Testing store connection")
    try:
        count = store.count()
    except StoreError as e:
        logger.error("Store health check failed: %s", e.message)
        return JSONResponse(
            status_code=500,
            content={"error": e.message, "details": "Database connection failed"},
        )
    except Exception as e:
        logger.exception("Health check failed")
        return JSONResponse(
            status_code=500,
            content={"error": str(e) or "Unknown error", "details": "API route failed"},
        )

    return HealthResponse(count=count, env=config_presence(settings))
