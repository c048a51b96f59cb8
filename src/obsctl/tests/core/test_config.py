import pytest

from obsctl.core.config import build_runtime_config
from obsctl.core.errors import MissingCredentialsError, MissingRegionError
from obsctl.core.models import Credentials

ENV = {
    "HUAWEICLOUD_SDK_AK": "env-ak",
    "HUAWEICLOUD_SDK_SK": "env-sk",
    "HUAWEICLOUD_SDK_REGION": "santiago",
}


def test_build_runtime_config_from_env(tmp_path):
    config = build_runtime_config(
        None, None, None, ENV, credentials_path=tmp_path / "credentials.csv"
    )

    assert config.credentials == Credentials("env-ak", "env-sk")
    assert config.region == "la-south-2"
    assert config.endpoint_url == "https://obs.la-south-2.myhuaweicloud.com"
    assert config.max_workers == 8


def test_build_runtime_config_reads_credentials_file(tmp_path):
    path = tmp_path / "creds.csv"
    path.write_text("User,AK,SK\nbob,file-ak,file-sk\n", encoding="utf-8")

    config = build_runtime_config(
        None, None, "la-south-2", {}, credentials_path=path, max_workers=3
    )

    assert config.credentials == Credentials("file-ak", "file-sk")
    assert config.max_workers == 3


def test_credentials_checked_before_region(tmp_path):
    with pytest.raises(MissingCredentialsError):
        build_runtime_config(
            None, None, None, {}, credentials_path=tmp_path / "missing.csv"
        )


def test_missing_region_is_fatal(tmp_path):
    env = {"HUAWEICLOUD_SDK_AK": "ak", "HUAWEICLOUD_SDK_SK": "sk"}
    with pytest.raises(MissingRegionError):
        build_runtime_config(None, None, None, env, credentials_path=tmp_path / "x")


def test_worker_pool_must_be_positive():
    with pytest.raises(ValueError):
        build_runtime_config("ak", "sk", "la-south-2", {}, max_workers=0)
