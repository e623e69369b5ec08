# sitegen/core/codegen_agent.py
"""
Code Generation Agent
- Exposes:
    SiteGenerator.generate(prompt) -> GeneratedSite
- Composes the fixed instruction block with the user's prompt, makes one model
  call and hands the raw reply to the tolerant parser.
"""
import logging
from typing import Any, Optional

from sitegen.core.llm_client import call_text_generation, get_llm
from sitegen.core.parser import parse_model_response
from sitegen.core.prompts import build_system_prompt, build_user_prompt
from sitegen.models import GeneratedSite
from sitegen.utils.config import Settings

logger = logging.getLogger(__name__)


def build_generation_prompt(prompt: str) -> str:
    return build_system_prompt() + "\n\n" + build_user_prompt(prompt)


class SiteGenerator:
    def __init__(self, settings: Settings, llm: Optional[Any] = None):
        self.settings = settings
        self._llm = llm

    @property
    def llm(self) -> Any:
        # created on first use so the app can start without an API key
        if self._llm is None:
            self._llm = get_llm(self.settings)
        return self._llm

    async def generate(self, prompt: str) -> GeneratedSite:
        full_prompt = build_generation_prompt(prompt)
        raw = await call_text_generation(
            self.llm,
            full_prompt,
            timeout=self.settings.llm_timeout,
            debug=self.settings.debug,
            log_dir=self.settings.log_dir,
        )
        site = parse_model_response(raw)
        missing = [k for k in ("html", "css", "js") if k not in site.model_fields_set]
        if missing:
            logger.warning("Model reply is missing keys: %s", ", ".join(missing))
        return site
