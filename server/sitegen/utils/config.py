# sitegen/utils/config.py
import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# per-agent sampling temperatures
AGENT_TEMPERATURES = {
    "codegen": 0.7,
}


def _env_bool(name: str, default: bool = False) -> bool:
    val = os.environ.get(name)
    if val is None:
        return default
    return val.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    """
    Process configuration. Built once from the environment (and .env) and handed
    to each service at construction time, so nothing below reads os.environ directly.
    """
    gemini_api_key: Optional[str] = Field(None, description="API key for the Gemini model")
    vercel_token: Optional[str] = Field(None, description="Auth token passed to the Vercel CLI")
    host: str = "0.0.0.0"
    port: int = 3001
    model_name: str = "gemini-2.5-flash"
    projects_dir: str = "./temp"
    llm_timeout: float = 180.0
    deploy_timeout: float = 300.0
    cleanup_retries: int = 5
    cleanup_delay: float = 1.0
    debug: bool = False
    log_dir: str = "./ai_backend_logs"
    log_level: str = "INFO"


def load_settings() -> Settings:
    load_dotenv()
    return Settings(
        gemini_api_key=os.environ.get("GEMINI_API_KEY") or os.environ.get("GOOGLE_API_KEY") or None,
        vercel_token=os.environ.get("VERCEL_TOKEN") or None,
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", 3001)),
        model_name=os.environ.get("SITEGEN_MODEL", "gemini-2.5-flash"),
        projects_dir=os.environ.get("SITEGEN_PROJECTS_DIR", "./temp"),
        llm_timeout=float(os.environ.get("SITEGEN_LLM_TIMEOUT", 180)),
        deploy_timeout=float(os.environ.get("SITEGEN_DEPLOY_TIMEOUT", 300)),
        cleanup_retries=int(os.environ.get("SITEGEN_CLEANUP_RETRIES", 5)),
        cleanup_delay=float(os.environ.get("SITEGEN_CLEANUP_DELAY", 1.0)),
        debug=_env_bool("SITEGEN_DEBUG"),
        log_dir=os.environ.get("AI_BACKEND_LOG_DIR", "./ai_backend_logs"),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    )


@lru_cache()
def get_settings() -> Settings:
    return load_settings()
