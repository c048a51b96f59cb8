import logging
from collections.abc import Mapping
from dataclasses import dataclass
from functools import partial
from pathlib import Path

from obsctl.core.credentials import (
    DEFAULT_CREDENTIALS_FILE,
    read_credentials_csv,
    resolve_credentials,
)
from obsctl.core.models import Credentials
from obsctl.core.regions import REGION_ENV_VAR, resolve_region

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8
ENDPOINT_TEMPLATE = "https://obs.{region}.myhuaweicloud.com"


@dataclass(frozen=True)
class RuntimeConfig:
    """
    Everything one invocation needs to talk to OBS.

    Built once by the CLI and handed to every component; nothing downstream
    reads the environment again.
    """

    credentials: Credentials
    region: str
    max_workers: int = DEFAULT_MAX_WORKERS

    @property
    def endpoint_url(self) -> str:
        return ENDPOINT_TEMPLATE.format(region=self.region)


def build_runtime_config(
    flag_ak: str | None,
    flag_sk: str | None,
    flag_region: str | None,
    env: Mapping[str, str],
    credentials_path: str | Path = DEFAULT_CREDENTIALS_FILE,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> RuntimeConfig:
    if max_workers < 1:
        raise ValueError(f"Worker pool size must be at least 1, got {max_workers}")

    credentials = resolve_credentials(
        flag_ak,
        flag_sk,
        env,
        read_file=partial(read_credentials_csv, credentials_path),
    )
    region = resolve_region(flag_region, env.get(REGION_ENV_VAR))
    logger.debug("Resolved region %s with %d workers", region, max_workers)

    return RuntimeConfig(credentials=credentials, region=region, max_workers=max_workers)
