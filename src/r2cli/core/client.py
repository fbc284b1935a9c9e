import logging
from typing import Any

import boto3
import botocore.session
from botocore.config import Config
from botocore.credentials import CredentialProvider, CredentialResolver
from botocore.credentials import Credentials as BotoCredentials

from r2cli.core.models import ResolvedConfig

logger = logging.getLogger(__name__)

R2_REGION = "auto"


class StaticR2CredentialProvider(CredentialProvider):
    """
    Supplies a fixed access key pair. The credentials never refresh or expire.
    """

    METHOD = "r2"
    CANONICAL_NAME = "R2"

    def __init__(self, access_key_id: str, secret_access_key: str):
        super().__init__()
        self._access_key_id = access_key_id
        self._secret_access_key = secret_access_key

    def load(self) -> BotoCredentials:
        return BotoCredentials(
            self._access_key_id, self._secret_access_key, method=self.METHOD
        )


def build_session(config: ResolvedConfig) -> boto3.Session:
    """
    Creates a boto3 session whose only credential source is the resolved config.
    """
    botocore_session = botocore.session.get_session()
    provider = StaticR2CredentialProvider(
        config.credentials.access_key_id, config.credentials.secret_access_key
    )
    botocore_session.register_component(
        "credential_provider", CredentialResolver(providers=[provider])
    )
    return boto3.Session(botocore_session=botocore_session, region_name=R2_REGION)


class R2Client:
    """
    Wrapper for the Boto3 S3 calls the CLI makes against R2.

    Remote failures (ClientError, BotoCoreError) are not caught here.
    """

    def __init__(self, client: Any):
        self._client = client

    @classmethod
    def from_config(cls, config: ResolvedConfig) -> "R2Client":
        session = build_session(config)
        boto_config = Config(
            region_name=R2_REGION,
            signature_version="s3v4",
            retries={"mode": "standard"},
        )
        logger.debug("Creating S3 client for %s", config.endpoint_url)
        client = session.client(
            "s3", endpoint_url=config.endpoint_url, config=boto_config
        )
        return cls(client)

    def list_buckets(self) -> list[str]:
        response = self._client.list_buckets()
        return [bucket.get("Name", "") for bucket in response.get("Buckets", [])]

    def list_objects(self, bucket: str) -> list[str]:
        """
        Returns the keys of a single ListObjectsV2 page. Continuation tokens
        are not followed.
        """
        response = self._client.list_objects_v2(Bucket=bucket)
        if response.get("IsTruncated"):
            logger.debug("Listing of %s is truncated to the first page", bucket)
        return [obj.get("Key", "") for obj in response.get("Contents", [])]

    def copy_object(self, bucket: str, copy_source: str, key: str) -> None:
        logger.debug("Copying %s to %s/%s", copy_source, bucket, key)
        self._client.copy_object(Bucket=bucket, CopySource=copy_source, Key=key)

    def delete_object(self, bucket: str, key: str) -> None:
        logger.debug("Deleting %s/%s", bucket, key)
        self._client.delete_object(Bucket=bucket, Key=key)

    def put_object(self, bucket: str, key: str, body: bytes) -> None:
        logger.debug("Uploading %d bytes to %s/%s", len(body), bucket, key)
        self._client.put_object(Bucket=bucket, Key=key, Body=body)
