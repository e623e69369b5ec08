# sitegen/core/deployer.py
import asyncio
import logging
import re
import shutil
from typing import List, Optional, Sequence, Tuple

from sitegen.core.errors import AuthMissingError, DeployCommandFailedError
from sitegen.models import DeployResult, StagingProject

logger = logging.getLogger(__name__)

URL_SCHEME = "https://"
DOMAIN_SUFFIX = ".vercel.app"
URL_NOT_FOUND = "URL not found."

_URL_TOKEN_RE = re.compile(r"https://[^\s\[\]()<>\"']+")


# ----------------------------
# Output parsing
# ----------------------------
def find_live_url(output: str) -> Optional[str]:
    """
    First line of CLI output mentioning both https:// and the hosting domain.
    Returns the URL token on that line (so 'Production: https://x.vercel.app [2s]'
    gives 'https://x.vercel.app'), else the trimmed line; None if no line matches.
    """
    for line in (output or "").splitlines():
        if URL_SCHEME in line and DOMAIN_SUFFIX in line:
            for token in _URL_TOKEN_RE.findall(line):
                if DOMAIN_SUFFIX in token:
                    return token
            return line.strip()
    return None


def redact(cmd: Sequence[str], secret: str) -> str:
    return " ".join("***" if secret and part == secret else part for part in cmd)


# ----------------------------
# Subprocess runner
# ----------------------------
class CommandTimeoutError(asyncio.TimeoutError):
    def __init__(self, timeout: Optional[float], output: str = ""):
        super().__init__(f"command timed out after {timeout}s")
        self.output = output


async def run_command(cmd: List[str], timeout: Optional[float] = None) -> Tuple[int, str]:
    """
    Run cmd without a shell and return (returncode, combined stdout+stderr).
    Raises FileNotFoundError/OSError if the process cannot start and
    CommandTimeoutError, carrying the output read so far, after killing a
    process that outlives timeout.
    """
    proc = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.STDOUT,
    )
    chunks: List[bytes] = []

    async def _drain() -> None:
        while True:
            chunk = await proc.stdout.read(4096)
            if not chunk:
                break
            chunks.append(chunk)
        await proc.wait()

    try:
        await asyncio.wait_for(_drain(), timeout=timeout)
    except asyncio.TimeoutError as e:
        proc.kill()
        await proc.wait()
        raise CommandTimeoutError(timeout, _decode(chunks)) from e
    return proc.returncode, _decode(chunks)


def _decode(chunks: List[bytes]) -> str:
    return b"".join(chunks).decode("utf-8", errors="replace")


class DeployInvoker:
    def __init__(self, timeout: Optional[float] = 300, executable: str = "npx"):
        self.timeout = timeout
        self.executable = executable

    def build_command(self, project: StagingProject, auth_token: str) -> List[str]:
        exe = shutil.which(self.executable)
        if exe is None:
            raise DeployCommandFailedError(f"'{self.executable}' not found on PATH; cannot start deploy")
        return [
            exe, "vercel",
            "--cwd", str(project.directory),
            "--prod",
            "--yes",
            "--token", auth_token,
        ]

    async def deploy(self, project: StagingProject, auth_token: Optional[str]) -> DeployResult:
        if not auth_token:
            raise AuthMissingError("Vercel authentication token is missing.")

        cmd = self.build_command(project, auth_token)
        logger.info("Running deploy: %s", redact(cmd, auth_token))
        try:
            code, output = await run_command(cmd, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            output = getattr(e, "output", "")
            logger.error("Deploy timed out after %ss:\n%s", self.timeout, output)
            raise DeployCommandFailedError(f"deploy timed out after {self.timeout}s", output=output) from e
        except OSError as e:
            logger.error("Deploy command could not be started: %s", e)
            raise DeployCommandFailedError(f"deploy command could not be started: {e}") from e

        if code != 0:
            logger.error("Deploy error (exit %s):\n%s", code, output)
            raise DeployCommandFailedError(f"deploy exited with status {code}", output=output, returncode=code)

        url = find_live_url(output)
        if url is None:
            logger.warning("Deploy succeeded but no URL was found in its output")
            url = URL_NOT_FOUND
        logger.info("Successfully deployed. URL: %s", url)
        return DeployResult(success=True, url=url, output=output)
