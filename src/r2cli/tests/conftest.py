import boto3
import pytest
from moto import mock_aws

from r2cli.core.client import R2Client
from r2cli.core.models import AccountMetadata, Credentials, ResolvedConfig

R2_ENV_VARS = ("R2_ACCESS_KEY_ID", "R2_SECRET_ACCESS_KEY", "R2_ACCOUNT_ID")

VALID_CONFIG = """\
[credentials]
access_key_id = "file-key"
secret_access_key = "file-secret"

[metadata]
account_id = "file-account"
"""


@pytest.fixture(autouse=True)
def clear_r2_env(monkeypatch):
    """Keeps the developer's own R2 credentials out of every test."""
    for name in R2_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("R2_VERBOSE", raising=False)


@pytest.fixture(scope="function")
def aws_credentials(monkeypatch):
    """Mocked AWS Credentials for moto."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture(scope="function")
def s3_mock(aws_credentials):
    with mock_aws():
        yield boto3.client("s3", region_name="us-east-1")


@pytest.fixture
def r2_client(s3_mock):
    return R2Client(s3_mock)


@pytest.fixture
def resolved_config():
    return ResolvedConfig(
        credentials=Credentials(
            access_key_id="env-key", secret_access_key="env-secret"
        ),
        metadata=AccountMetadata(account_id="env-account"),
    )


@pytest.fixture
def full_env():
    return {
        "R2_ACCESS_KEY_ID": "env-key",
        "R2_SECRET_ACCESS_KEY": "env-secret",
        "R2_ACCOUNT_ID": "env-account",
    }


@pytest.fixture
def write_config(tmp_path):
    """Writes a config file under a fake home and returns its path."""

    def _write(contents: str = VALID_CONFIG):
        config_path = tmp_path / ".r2" / "config"
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(contents)
        return config_path

    return _write
