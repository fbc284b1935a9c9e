class R2Error(Exception):
    """Base class for failures raised by the r2 client itself."""


class ConfigError(R2Error):
    """Credentials could not be resolved from the environment or config file."""


class UsageError(R2Error):
    """Command arguments are well-formed for the parser but not usable."""


class MovePartialError(R2Error):
    """
    A move copied the object but could not delete the source.

    Both the source and the destination objects exist afterwards.
    """

    def __init__(self, bucket: str, source_key: str, dest_key: str):
        self.bucket = bucket
        self.source_key = source_key
        self.dest_key = dest_key
        super().__init__(
            f"Copied {bucket}/{source_key} to {bucket}/{dest_key} "
            f"but failed to delete {bucket}/{source_key}"
        )
