# sitegen/core/errors.py
from typing import Optional


class SiteGenError(Exception):
    """Base class for failures raised by the generation and publish pipeline."""


class MalformedResponseError(SiteGenError):
    """The model reply did not contain a recoverable {html, css, js} object."""


class UpstreamError(SiteGenError):
    """The call to the generative model failed, timed out or was not configured."""


class FilesystemError(SiteGenError):
    """Creating the staging directory or writing one of its files failed."""


class AuthMissingError(SiteGenError):
    """No deploy token is configured."""


class DeployCommandFailedError(SiteGenError):
    def __init__(self, message: str, output: str = "", returncode: Optional[int] = None):
        super().__init__(message)
        self.output = output
        self.returncode = returncode


class CleanupFailedError(SiteGenError):
    """A staging directory could not be removed within the retry budget."""
