# sitegen/api/publish.py
import logging

from fastapi import APIRouter, Depends, HTTPException

from sitegen.api.deps import get_publisher
from sitegen.core.errors import AuthMissingError, DeployCommandFailedError, FilesystemError
from sitegen.core.publisher import Publisher
from sitegen.models import ErrorResponse, GeneratedSite, PublishRequest, PublishResponse

router = APIRouter()
logger = logging.getLogger(__name__)

PUBLISH_OK = "Successfully deployed to Vercel!"
AUTH_MISSING = "Vercel authentication token is missing. Set VERCEL_TOKEN in the environment or .env file."
STAGING_FAILED = "Failed to create files for deployment."
DEPLOY_FAILED = "Failed to deploy to Vercel."


@router.post(
    "/publish",
    response_model=PublishResponse,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def publish(req: PublishRequest, publisher: Publisher = Depends(get_publisher)):
    logger.info("Received request for publishing to Vercel.")
    site = GeneratedSite(html=req.html, css=req.css, js=req.js)
    try:
        result = await publisher.publish(site)
    except AuthMissingError:
        raise HTTPException(status_code=401, detail=AUTH_MISSING)
    except FilesystemError as e:
        logger.error("File system error: %s", e)
        raise HTTPException(status_code=500, detail=STAGING_FAILED)
    except DeployCommandFailedError as e:
        logger.error("Deploy failed: %s", e)
        raise HTTPException(status_code=500, detail=DEPLOY_FAILED)
    except Exception as e:
        logger.exception("Unexpected publish failure (%s): %s", type(e).__name__, e)
        raise HTTPException(status_code=500, detail=DEPLOY_FAILED)

    return PublishResponse(message=PUBLISH_OK, url=result.url or "")
