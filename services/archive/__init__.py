"""Object-store archive exports."""

from .s3 import S3ArchiveWriter, build_object_key

__all__ = [
    "S3ArchiveWriter",
    "build_object_key",
]
