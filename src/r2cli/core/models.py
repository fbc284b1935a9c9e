from dataclasses import dataclass, field

from r2cli.core.errors import UsageError

R2_ENDPOINT_TEMPLATE = "https://{account_id}.r2.cloudflarestorage.com"


@dataclass(frozen=True)
class Credentials:
    access_key_id: str
    secret_access_key: str = field(repr=False)


@dataclass(frozen=True)
class AccountMetadata:
    account_id: str


@dataclass(frozen=True)
class ResolvedConfig:
    """Credentials and account metadata, taken together from a single source."""

    credentials: Credentials
    metadata: AccountMetadata

    @property
    def endpoint_url(self) -> str:
        return R2_ENDPOINT_TEMPLATE.format(account_id=self.metadata.account_id)


@dataclass(frozen=True)
class ListBuckets:
    pass


@dataclass(frozen=True)
class ListObjects:
    bucket: str


@dataclass(frozen=True)
class Move:
    bucket: str
    src_key: str
    dst_key: str

    @property
    def copy_source(self) -> str:
        return f"{self.bucket}/{self.src_key}"


@dataclass(frozen=True)
class CopyUpload:
    local_path: str
    bucket: str
    dest_key: str

    @classmethod
    def from_destination(cls, local_path: str, destination: str) -> "CopyUpload":
        """
        Builds an upload from a 'bucket/key' destination.

        Only the first '/' separates the bucket, so 'b/dir/f.txt' keeps the
        key 'dir/f.txt' intact.
        """
        bucket, sep, key = destination.partition("/")
        if not sep or not bucket or not key:
            raise UsageError("Destination must be in format bucket/key")
        return cls(local_path=local_path, bucket=bucket, dest_key=key)


@dataclass(frozen=True)
class Delete:
    bucket: str
    key: str


Command = ListBuckets | ListObjects | Move | CopyUpload | Delete
