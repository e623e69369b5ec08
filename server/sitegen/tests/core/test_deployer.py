import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from sitegen.core.deployer import URL_NOT_FOUND, CommandTimeoutError, DeployInvoker, find_live_url, redact, run_command
from sitegen.core.errors import AuthMissingError, DeployCommandFailedError
from sitegen.models import StagingProject


VERCEL_OUTPUT = """Vercel CLI 37.4.2
Retrieving project…
🔍  Inspect: https://vercel.com/acme/site/9bX2 [1s]
✅  Production: https://example.vercel.app [3s]
Done.
"""


@pytest.fixture
def project(tmp_path):
    return StagingProject(directory=tmp_path / "proj")


@pytest.fixture
def invoker():
    return DeployInvoker(timeout=5)


def test_find_live_url_picks_first_line_with_scheme_and_domain():
    assert find_live_url(VERCEL_OUTPUT) == "https://example.vercel.app"


def test_find_live_url_bare_url_line():
    assert find_live_url("  https://site-abc123.vercel.app  \n") == "https://site-abc123.vercel.app"


def test_find_live_url_none_when_absent():
    assert find_live_url("Deployed to https://vercel.com/dashboard\nall good") is None
    assert find_live_url("") is None


def test_redact_hides_token():
    assert redact(["npx", "vercel", "--token", "s3cret"], "s3cret") == "npx vercel --token ***"


def test_build_command(invoker, project):
    with patch("sitegen.core.deployer.shutil.which", return_value="/usr/bin/npx"):
        cmd = invoker.build_command(project, "tok")

    assert cmd == ["/usr/bin/npx", "vercel", "--cwd", str(project.directory), "--prod", "--yes", "--token", "tok"]


@pytest.mark.asyncio
async def test_deploy_without_token_fails(invoker, project):
    with pytest.raises(AuthMissingError):
        await invoker.deploy(project, "")


@pytest.mark.asyncio
async def test_deploy_returns_live_url(invoker, project):
    with patch("sitegen.core.deployer.shutil.which", return_value="/usr/bin/npx"), \
         patch("sitegen.core.deployer.run_command", AsyncMock(return_value=(0, VERCEL_OUTPUT))) as run:
        result = await invoker.deploy(project, "tok")

    assert result.success is True
    assert result.url == "https://example.vercel.app"
    assert run.await_args.kwargs["timeout"] == 5


@pytest.mark.asyncio
async def test_deploy_with_unparsable_output_is_degraded_success(invoker, project):
    with patch("sitegen.core.deployer.shutil.which", return_value="/usr/bin/npx"), \
         patch("sitegen.core.deployer.run_command", AsyncMock(return_value=(0, "Deployed!\n"))):
        result = await invoker.deploy(project, "tok")

    assert result.success is True
    assert result.url == URL_NOT_FOUND


@pytest.mark.asyncio
async def test_deploy_nonzero_exit_carries_output(invoker, project):
    with patch("sitegen.core.deployer.shutil.which", return_value="/usr/bin/npx"), \
         patch("sitegen.core.deployer.run_command", AsyncMock(return_value=(1, "Error: invalid token"))) as run:
        with pytest.raises(DeployCommandFailedError) as excinfo:
            await invoker.deploy(project, "tok")

    assert excinfo.value.returncode == 1
    assert "invalid token" in excinfo.value.output
    run.assert_awaited_once()


@pytest.mark.asyncio
async def test_deploy_launch_failure(invoker, project):
    with patch("sitegen.core.deployer.shutil.which", return_value="/usr/bin/npx"), \
         patch("sitegen.core.deployer.run_command", AsyncMock(side_effect=FileNotFoundError("npx"))):
        with pytest.raises(DeployCommandFailedError):
            await invoker.deploy(project, "tok")


@pytest.mark.asyncio
async def test_deploy_missing_executable(invoker, project):
    with patch("sitegen.core.deployer.shutil.which", return_value=None):
        with pytest.raises(DeployCommandFailedError):
            await invoker.deploy(project, "tok")


@pytest.mark.asyncio
async def test_deploy_timeout(invoker, project):
    with patch("sitegen.core.deployer.shutil.which", return_value="/usr/bin/npx"), \
         patch("sitegen.core.deployer.run_command", AsyncMock(side_effect=asyncio.TimeoutError())):
        with pytest.raises(DeployCommandFailedError, match="timed out"):
            await invoker.deploy(project, "tok")


def _fake_proc(chunks, hang=False, returncode=0):
    """Subprocess stand-in whose stdout yields chunks, then EOF (or blocks when hang is set)."""
    pending = list(chunks)

    async def _read(n):
        if pending:
            return pending.pop(0)
        if hang:
            await asyncio.sleep(1)
        return b""

    proc = MagicMock()
    proc.returncode = returncode
    proc.stdout.read = AsyncMock(side_effect=_read)
    proc.wait = AsyncMock(return_value=returncode)
    return proc


@pytest.mark.asyncio
async def test_run_command_combines_output():
    proc = _fake_proc([b"out and ", b"err\n"])

    with patch("sitegen.core.deployer.asyncio.create_subprocess_exec", AsyncMock(return_value=proc)) as create:
        code, output = await run_command(["npx", "vercel"], timeout=1)

    assert (code, output) == (0, "out and err\n")
    assert create.await_args.kwargs["stderr"] == asyncio.subprocess.STDOUT


@pytest.mark.asyncio
async def test_run_command_kills_on_timeout_and_keeps_partial_output():
    proc = _fake_proc([b"Uploading [====      ]\n"], hang=True, returncode=-9)

    with patch("sitegen.core.deployer.asyncio.create_subprocess_exec", AsyncMock(return_value=proc)):
        with pytest.raises(CommandTimeoutError) as excinfo:
            await run_command(["npx", "vercel"], timeout=0.05)

    proc.kill.assert_called_once()
    assert excinfo.value.output == "Uploading [====      ]\n"


@pytest.mark.asyncio
async def test_deploy_timeout_carries_partial_output(invoker, project):
    timeout = CommandTimeoutError(5, output="Uploading...\n")
    with patch("sitegen.core.deployer.shutil.which", return_value="/usr/bin/npx"), \
         patch("sitegen.core.deployer.run_command", AsyncMock(side_effect=timeout)):
        with pytest.raises(DeployCommandFailedError) as excinfo:
            await invoker.deploy(project, "tok")

    assert excinfo.value.output == "Uploading...\n"
