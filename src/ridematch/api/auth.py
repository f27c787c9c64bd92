import logging
import secrets

from fastapi import Header, HTTPException, Request

from ridematch.api.dependencies import SettingsDep

logger = logging.getLogger(__name__)


def verify_api_key(
    request: Request,
    settings: SettingsDep,
    x_api_key: str = Header(...),
) -> None:
    """Checks the X-API-Key header against ``API_KEY`` from settings."""
    api_key = settings.api.key
    if not api_key:
        logger.error("API_KEY is not configured; rejecting request")
        raise HTTPException(status_code=500, detail="API_KEY not configured")

    if not secrets.compare_digest(x_api_key.encode(), api_key.encode()):
        client = request.client.host if request.client else "unknown"
        logger.warning(f"Rejected request to {request.url.path} from {client}: invalid API key")
        raise HTTPException(status_code=401, detail="Invalid API key")
