from unittest.mock import AsyncMock, MagicMock

import pytest

from sitegen.utils.config import Settings


@pytest.fixture
def settings(tmp_path):
    return Settings(
        gemini_api_key="test-gemini-key",
        vercel_token="test-vercel-token",
        projects_dir=str(tmp_path / "projects"),
        log_dir=str(tmp_path / "logs"),
        llm_timeout=5,
        deploy_timeout=5,
        cleanup_retries=3,
        cleanup_delay=0,
    )


@pytest.fixture
def fake_llm():
    """Chat model stand-in: set fake_llm.reply to control the text returned by ainvoke."""
    llm = MagicMock()
    llm.reply = ""

    async def _ainvoke(prompt):
        message = MagicMock()
        message.content = llm.reply
        return message

    llm.ainvoke = AsyncMock(side_effect=_ainvoke)
    return llm
