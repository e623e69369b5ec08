# sitegen/core/llm_client.py
import os
import json
import time
import asyncio
import logging
from typing import Any, Dict, Optional

from langchain_google_genai import ChatGoogleGenerativeAI

from sitegen.core.errors import UpstreamError
from sitegen.utils.config import AGENT_TEMPERATURES, Settings

logger = logging.getLogger(__name__)


# -------------------------
# LLM init + text call
# -------------------------
def get_llm(settings: Settings, agent: str = "codegen") -> ChatGoogleGenerativeAI:
    api_key = settings.gemini_api_key
    if not api_key:
        raise UpstreamError("Please set GEMINI_API_KEY environment variable for Gemini access.")
    return ChatGoogleGenerativeAI(
        model=settings.model_name,
        temperature=AGENT_TEMPERATURES.get(agent, 0.5),
        google_api_key=api_key,
    )


def save_debug_log(log_dir: str, prefix: str, payload: Dict[str, Any]) -> None:
    fname = f"{int(time.time() * 1000)}_{prefix}.json"
    try:
        os.makedirs(log_dir, exist_ok=True)
        with open(os.path.join(log_dir, fname), "w", encoding="utf-8") as fh:
            json.dump(payload, fh, indent=2, ensure_ascii=False)
    except OSError:
        logger.exception("Failed to write debug log")


def message_text(result: Any) -> str:
    """
    Text of a chat model reply. Gemini replies carry either a plain string or a
    list of content parts ({"type": "text", "text": ...} dicts or strings).
    """
    content = getattr(result, "content", result)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        return "".join(parts)
    return "" if content is None else str(content)


async def call_text_generation(llm: Any,
                               prompt: str,
                               timeout: Optional[float] = 180,
                               debug: bool = False,
                               log_dir: str = "./ai_backend_logs") -> str:
    """
    Single, stateless generation call. No retries: any failure (including a
    timeout or an empty reply) is surfaced as UpstreamError.
    """
    start_ts = time.time()
    try:
        result = await asyncio.wait_for(llm.ainvoke(prompt), timeout=timeout)
    except asyncio.TimeoutError as e:
        logger.error("LLM call timed out after %ss", timeout)
        if debug:
            save_debug_log(log_dir, "llm_timeout", {"prompt": prompt, "timeout_s": timeout})
        raise UpstreamError(f"Model call timed out after {timeout}s") from e
    except Exception as e:
        logger.exception("LLM call failed: %s", e)
        if debug:
            save_debug_log(log_dir, "llm_error", {"prompt": prompt, "error": repr(e)})
        raise UpstreamError(f"Model call failed: {e}") from e

    text = message_text(result)
    duration = time.time() - start_ts
    logger.info("LLM call finished in %.1fs (%d chars)", duration, len(text))
    if debug:
        save_debug_log(log_dir, "llm_attempt", {"prompt": prompt, "raw_result": text, "duration_s": duration})
    if not text.strip():
        raise UpstreamError("Model returned an empty reply")
    return text
