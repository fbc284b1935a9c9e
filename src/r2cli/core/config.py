import logging
import os
import tomllib
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError

from r2cli.core.errors import ConfigError
from r2cli.core.models import AccountMetadata, Credentials, ResolvedConfig

logger = logging.getLogger(__name__)

ENV_ACCESS_KEY_ID = "R2_ACCESS_KEY_ID"
ENV_SECRET_ACCESS_KEY = "R2_SECRET_ACCESS_KEY"
ENV_ACCOUNT_ID = "R2_ACCOUNT_ID"

CONFIG_DIR_NAME = ".r2"
CONFIG_FILE_NAME = "config"


class CredentialsSection(BaseModel):
    model_config = ConfigDict(extra="ignore")

    access_key_id: StrictStr = Field(..., min_length=1)
    secret_access_key: StrictStr = Field(..., min_length=1)


class MetadataSection(BaseModel):
    model_config = ConfigDict(extra="ignore")

    account_id: StrictStr = Field(..., min_length=1)


class ConfigFile(BaseModel):
    """Schema of ~/.r2/config once parsed from TOML."""

    model_config = ConfigDict(extra="ignore")

    credentials: CredentialsSection
    metadata: MetadataSection

    def to_resolved(self) -> ResolvedConfig:
        return ResolvedConfig(
            credentials=Credentials(
                access_key_id=self.credentials.access_key_id,
                secret_access_key=self.credentials.secret_access_key,
            ),
            metadata=AccountMetadata(account_id=self.metadata.account_id),
        )


def default_config_path() -> Path:
    try:
        home = Path.home()
    except RuntimeError as e:
        raise ConfigError(f"Could not determine home directory: {e}") from e
    return home / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def from_environment(environ: Mapping[str, str]) -> ResolvedConfig | None:
    """
    Returns the config only when all three variables are set and non-empty.

    A partial set is discarded as a whole; values are never mixed with the
    config file.
    """
    access_key_id = environ.get(ENV_ACCESS_KEY_ID)
    secret_access_key = environ.get(ENV_SECRET_ACCESS_KEY)
    account_id = environ.get(ENV_ACCOUNT_ID)

    if not (access_key_id and secret_access_key and account_id):
        return None

    return ResolvedConfig(
        credentials=Credentials(
            access_key_id=access_key_id, secret_access_key=secret_access_key
        ),
        metadata=AccountMetadata(account_id=account_id),
    )


def from_file(config_path: Path) -> ResolvedConfig:
    try:
        contents = config_path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {config_path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Could not read config file {config_path}: {e}") from e

    try:
        data = tomllib.loads(contents)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    try:
        parsed = ConfigFile.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config file {config_path}: {e}") from e

    return parsed.to_resolved()


def resolve(
    environ: Mapping[str, str] | None = None, config_path: Path | None = None
) -> ResolvedConfig:
    """
    Resolves credentials and account metadata for this invocation.

    Environment variables win when all three are present. Otherwise the
    config file is the only other source, and any problem with it is a
    ConfigError.
    """
    if environ is None:
        environ = os.environ

    resolved = from_environment(environ)
    if resolved is not None:
        logger.debug("Using credentials from environment variables")
        return resolved

    if config_path is None:
        config_path = default_config_path()

    logger.debug("Using credentials from %s", config_path)
    return from_file(config_path)
