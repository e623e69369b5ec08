# sitegen/core/publisher.py
"""
Publish pipeline: STAGING -> DEPLOYING -> response, with cleanup of the staging
directory running as a detached task after the deploy returns, whether it
succeeded or not. Cleanup failures never reach the caller; they are logged and
handed to on_cleanup_error when one is given.
"""
import asyncio
import logging
from typing import Callable, Optional, Set

from sitegen.core.deployer import DeployInvoker
from sitegen.core.errors import AuthMissingError
from sitegen.core.staging import StagingManager
from sitegen.models import DeployResult, GeneratedSite, StagingProject
from sitegen.utils.config import Settings

logger = logging.getLogger(__name__)

CleanupErrorCallback = Callable[[StagingProject, BaseException], None]


class Publisher:
    def __init__(self,
                 stager: StagingManager,
                 deployer: DeployInvoker,
                 auth_token: Optional[str],
                 on_cleanup_error: Optional[CleanupErrorCallback] = None):
        self.stager = stager
        self.deployer = deployer
        self.auth_token = auth_token
        self.on_cleanup_error = on_cleanup_error
        self._cleanups: Set[asyncio.Task] = set()

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "Publisher":
        stager = StagingManager(
            settings.projects_dir,
            cleanup_retries=settings.cleanup_retries,
            cleanup_delay=settings.cleanup_delay,
        )
        deployer = DeployInvoker(timeout=settings.deploy_timeout)
        return cls(stager, deployer, settings.vercel_token, **kwargs)

    async def publish(self, site: GeneratedSite) -> DeployResult:
        # checked before staging so a misconfigured server writes nothing
        if not self.auth_token:
            logger.error("Vercel authentication token is missing.")
            raise AuthMissingError("Vercel authentication token is missing.")

        project = await self.stager.stage(site)
        logger.info("Deploying %s", project.directory)
        try:
            return await self.deployer.deploy(project, self.auth_token)
        finally:
            self.schedule_cleanup(project)

    def schedule_cleanup(self, project: StagingProject) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(self._cleanup(project))
        self._cleanups.add(task)
        task.add_done_callback(self._cleanups.discard)
        return task

    async def _cleanup(self, project: StagingProject) -> None:
        try:
            await self.stager.cleanup(project)
        except Exception as e:
            logger.error("Final cleanup failed with error: %s", e)
            if self.on_cleanup_error is not None:
                try:
                    self.on_cleanup_error(project, e)
                except Exception:
                    logger.exception("Cleanup error callback failed for %s", project.directory)

    @property
    def pending_cleanups(self) -> int:
        return len(self._cleanups)

    async def wait_for_cleanups(self) -> None:
        if self._cleanups:
            await asyncio.gather(*list(self._cleanups), return_exceptions=True)
