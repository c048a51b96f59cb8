from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from obsctl.core.models import BatchReport


class ObsCtlError(Exception):
    """Base class for every failure the CLI knows how to report."""

    exit_code: int = 1


class MissingCredentialsError(ObsCtlError):
    def __init__(self, message: str | None = None):
        super().__init__(
            message
            or (
                "Missing credentials. Provide them via command-line flags "
                "(--ak, --sk), or set the environment variables "
                "HUAWEICLOUD_SDK_AK and HUAWEICLOUD_SDK_SK, "
                "or provide a credentials.csv file in the current working directory."
            )
        )


class MissingRegionError(ObsCtlError):
    def __init__(self, message: str | None = None):
        super().__init__(
            message
            or (
                "No OBS region specified. Use the --region flag "
                "or set the HUAWEICLOUD_SDK_REGION environment variable."
            )
        )


class LocalIoError(ObsCtlError):
    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{message}: {path}")


class RemoteApiError(ObsCtlError):
    """
    Wraps a failure returned by the storage service or its transport.

    `status` is the HTTP status code when the service answered, None when the
    request never got a response (DNS, connection, timeout).
    """

    def __init__(
        self,
        operation: str,
        code: str,
        message: str,
        status: int | None = None,
    ):
        self.operation = operation
        self.code = code
        self.status = status
        self.message = message
        status_render = f" (HTTP {status})" if status is not None else ""
        super().__init__(f"{operation} failed: {code}{status_render} - {message}")

    @property
    def is_not_found(self) -> bool:
        return self.status == 404 or self.code in {"404", "NoSuchKey", "NoSuchBucket"}


class PartialBatchFailure(ObsCtlError):
    def __init__(self, report: "BatchReport"):
        self.report = report
        super().__init__(f"{report.failures} of {len(report.outcomes)} tasks failed")
