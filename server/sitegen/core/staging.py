# sitegen/core/staging.py
"""
Deployment staging: one throwaway project directory per publish call holding
index.html, style.css, script.js and the vercel.json routing config.
"""
import asyncio
import errno
import json
import logging
import shutil
import time
import uuid
from pathlib import Path
from typing import List, Tuple, Union

from sitegen.core.errors import CleanupFailedError, FilesystemError
from sitegen.models import GeneratedSite, StagingProject
from sitegen.utils.file_helpers import write_text_file

logger = logging.getLogger(__name__)

SITE_FILES = (
    ("index.html", "html"),
    ("style.css", "css"),
    ("script.js", "js"),
)
ROUTING_CONFIG_NAME = "vercel.json"
ROUTING_CONFIG = {
    "rewrites": [
        {"source": "/(.*)", "destination": "/index.html"},
    ],
}

# errno values treated as "someone still holds a handle, try again"
_BUSY_ERRNOS = {errno.EBUSY, errno.ENOTEMPTY}
# Windows sharing violation
_WINERROR_SHARING_VIOLATION = 32


def routing_config_text() -> str:
    return json.dumps(ROUTING_CONFIG, indent=2)


def project_files(site: GeneratedSite) -> List[Tuple[str, str]]:
    files = [(name, getattr(site, field) or "") for name, field in SITE_FILES]
    files.append((ROUTING_CONFIG_NAME, routing_config_text()))
    return files


def _is_busy(exc: OSError) -> bool:
    if exc.errno in _BUSY_ERRNOS:
        return True
    return getattr(exc, "winerror", None) == _WINERROR_SHARING_VIOLATION


class StagingManager:
    def __init__(self,
                 root: Union[str, Path],
                 cleanup_retries: int = 5,
                 cleanup_delay: float = 1.0):
        self.root = Path(root)
        self.cleanup_retries = max(1, cleanup_retries)
        self.cleanup_delay = cleanup_delay

    def new_project_dir(self) -> Path:
        # timestamp keeps directories sortable; the random suffix makes them unique
        return self.root / f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:12]}"

    async def stage(self, site: GeneratedSite) -> StagingProject:
        project = StagingProject(directory=self.new_project_dir(), files=project_files(site))
        await asyncio.to_thread(self._write_project, project)
        logger.info("Staged %d files in %s", len(project.files), project.directory)
        return project

    def _write_project(self, project: StagingProject) -> None:
        try:
            project.directory.mkdir(parents=True, exist_ok=False)
        except OSError as e:
            raise FilesystemError(f"could not create {project.directory}: {e}") from e
        try:
            for name, content in project.files:
                write_text_file(project.directory, name, content)
        except (OSError, ValueError) as e:
            logger.error("Writing staging files failed, removing %s: %s", project.directory, e)
            shutil.rmtree(project.directory, ignore_errors=True)
            raise FilesystemError(f"could not write files in {project.directory}: {e}") from e

    async def cleanup(self, project: StagingProject) -> None:
        """
        Remove the project directory, retrying while the tree is busy (e.g. the deploy
        CLI or a file watcher still holds a handle). A directory that is already gone
        counts as removed. Raises CleanupFailedError once the retry budget is spent.
        """
        path = project.directory
        for attempt in range(1, self.cleanup_retries + 1):
            try:
                await asyncio.to_thread(shutil.rmtree, path)
                logger.info("Successfully cleaned up temporary directory: %s", path)
                return
            except FileNotFoundError:
                return
            except OSError as e:
                if _is_busy(e) and attempt < self.cleanup_retries:
                    logger.warning(
                        "Cleanup of %s failed (attempt %d/%d), retrying in %ss: %s",
                        path, attempt, self.cleanup_retries, self.cleanup_delay, e,
                    )
                    await asyncio.sleep(self.cleanup_delay)
                    continue
                logger.error("Final cleanup failed for %s: %s", path, e)
                raise CleanupFailedError(f"could not remove {path}: {e}") from e
