# sitegen/api/generate.py
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from sitegen.api.deps import get_site_generator
from sitegen.core.codegen_agent import SiteGenerator
from sitegen.models import ErrorResponse, PromptRequest

router = APIRouter()
logger = logging.getLogger(__name__)

GENERATE_FAILED = "Failed to generate code."


@router.post(
    "/generate-code",
    response_model=Dict[str, Any],
    responses={500: {"model": ErrorResponse}},
)
async def generate_code(req: PromptRequest, generator: SiteGenerator = Depends(get_site_generator)):
    """
    Generate a three-file site for the prompt. Returns the model's object as-is:
    {"html": ..., "css": ..., "js": ...}. Every failure is a generic 500.
    """
    logger.info("Received request for code generation.")
    try:
        site = await generator.generate(req.prompt)
    except Exception as e:
        # upstream and parse errors are logged, never shown to the client
        logger.error("Error generating code (%s): %s", type(e).__name__, e)
        raise HTTPException(status_code=500, detail=GENERATE_FAILED)

    logger.info("Successfully generated code.")
    return site.model_dump(exclude_unset=True)
