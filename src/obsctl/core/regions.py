import logging
import re
from types import MappingProxyType

from obsctl.core.errors import MissingRegionError

logger = logging.getLogger(__name__)

REGION_ENV_VAR = "HUAWEICLOUD_SDK_REGION"

REGION_ALIASES = MappingProxyType(
    {
        "santiago": "la-south-2",
        "mexico-city": "la-north-2",
        "sao-paulo": "sa-brazil-1",
        "lima": "sa-peru-1",
        "buenos-aires": "sa-argentina-1",
        "johannesburg": "af-south-1",
        "cairo": "af-north-1",
        "istanbul": "tr-west-1",
        "riyadh": "me-east-1",
        "dublin": "eu-west-101",
        "paris": "eu-west-0",
        "singapore": "ap-southeast-3",
        "hong-kong": "ap-southeast-1",
        "bangkok": "ap-southeast-2",
        "jakarta": "ap-southeast-4",
        "manila": "ap-southeast-5",
        "beijing": "cn-north-4",
        "shanghai": "cn-east-3",
        "guangzhou": "cn-south-1",
        "guiyang": "cn-southwest-2",
        "ulanqab": "cn-north-9",
    }
)


def _alias_key(name: str) -> str:
    return re.sub(r"[\s_]+", "-", name.strip().lower())


def region_aliases() -> dict[str, str]:
    return dict(REGION_ALIASES)


def match_region_alias(value: str) -> str:
    """Maps a known city name to its region code, anything else passes through."""
    region = REGION_ALIASES.get(_alias_key(value))
    if region:
        logger.debug("Region alias '%s' resolved to %s", value, region)
        return region
    return value.strip()


def resolve_region(flag_region: str | None, env_default: str | None) -> str:
    for candidate in (flag_region, env_default):
        if candidate and candidate.strip():
            return match_region_alias(candidate)

    raise MissingRegionError()
