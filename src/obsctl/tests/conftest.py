import os

import boto3
import pytest
from moto import mock_aws

from obsctl.services.obs.client import ObsClient

TEST_REGION = "eu-west-1"


@pytest.fixture(scope="function")
def aws_credentials():
    """Mocked AWS Credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = TEST_REGION


@pytest.fixture(scope="function")
def s3_mock(aws_credentials):
    with mock_aws():
        yield boto3.client("s3", region_name=TEST_REGION)


@pytest.fixture
def obs_client_wrapper(s3_mock):
    return ObsClient(region=TEST_REGION, client=s3_mock)


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "HUAWEICLOUD_SDK_AK",
        "HUAWEICLOUD_SDK_SK",
        "HUAWEICLOUD_SDK_REGION",
    ):
        monkeypatch.delenv(name, raising=False)

