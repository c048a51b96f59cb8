import csv
import logging
from collections.abc import Callable, Mapping
from pathlib import Path

from obsctl.core.errors import MissingCredentialsError
from obsctl.core.models import Credentials

logger = logging.getLogger(__name__)

AK_ENV_VAR = "HUAWEICLOUD_SDK_AK"
SK_ENV_VAR = "HUAWEICLOUD_SDK_SK"
DEFAULT_CREDENTIALS_FILE = "credentials.csv"

CredentialsReader = Callable[[], Credentials | None]


def _pair(access_key: str | None, secret_key: str | None) -> Credentials | None:
    if access_key and secret_key:
        return Credentials(access_key=access_key, secret_key=secret_key)
    return None


def read_credentials_csv(
    path: str | Path = DEFAULT_CREDENTIALS_FILE,
) -> Credentials | None:
    """
    Reads the AK/SK pair from a credentials CSV as downloaded from the console.

    The header row is skipped, the first data row carries the access key in its
    second column and the secret key in its third. A missing file or a row that
    doesn't have both values yields None rather than an error.
    """
    try:
        with open(path, newline="", encoding="utf-8-sig") as handle:
            rows = csv.reader(handle)
            next(rows, None)
            record = next(rows, None)
    except FileNotFoundError:
        logger.debug("No credentials file at %s", path)
        return None
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        logger.warning("Ignoring unreadable credentials file %s: %s", path, e)
        return None

    if record is None or len(record) < 3:
        logger.warning("Credentials file %s has no usable data row", path)
        return None

    return _pair(record[1].strip(), record[2].strip())


def resolve_credentials(
    flag_ak: str | None,
    flag_sk: str | None,
    env: Mapping[str, str],
    read_file: CredentialsReader = read_credentials_csv,
) -> Credentials:
    """
    Picks the first source that provides both keys: flags, environment, file.
    """
    credentials = _pair(flag_ak, flag_sk)
    if credentials:
        logger.warning(
            "Using AK/SK from command-line arguments, consider environment variables"
        )
        return credentials

    credentials = _pair(env.get(AK_ENV_VAR), env.get(SK_ENV_VAR))
    if credentials:
        logger.info("Using AK/SK from %s and %s", AK_ENV_VAR, SK_ENV_VAR)
        return credentials

    logger.info("%s or %s not set, checking credentials file", AK_ENV_VAR, SK_ENV_VAR)
    credentials = read_file()
    if credentials:
        logger.info("Using AK/SK from credentials file")
        return credentials

    raise MissingCredentialsError()
