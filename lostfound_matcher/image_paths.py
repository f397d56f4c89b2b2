"""
Resolution of stored image references to local file paths.

Items reference their photos in three shapes:
    http://localhost:3001/uploads/abc.jpg   absolute URL from the upload service
    /uploads/abc.jpg                        root-relative path
    abc.jpg                                 bare filename in the uploads folder

resolve_image_path() maps all of them onto the local upload root. It
touches no files so every shape can be tested without a filesystem.
"""

import os
from typing import Iterable, Optional
from urllib.parse import urlsplit

UPLOADS_DIR = "uploads"

DEFAULT_HOST_PREFIXES = tuple(
    p.strip().rstrip("/") for p in os.environ.get(
        "IMAGE_HOST_PREFIXES", "http://localhost:3001,http://127.0.0.1:3001"
    ).split(",") if p.strip()
)


def _is_url(ref: str) -> bool:
    return urlsplit(ref).scheme in ("http", "https")


def resolve_image_path(ref: Optional[str],
                       upload_root: str,
                       host_prefixes: Iterable[str] = DEFAULT_HOST_PREFIXES) -> Optional[str]:
    """
    Map an image reference to a local path under upload_root.

    Args:
        ref: Image reference as stored on the item.
        upload_root: Directory that contains the uploads folder.
        host_prefixes: URL prefixes served from upload_root.

    Returns:
        Local path, or None when the reference is empty or points at a
        host we do not serve.
    """
    if not ref or not ref.strip():
        return None
    ref = ref.strip()

    if _is_url(ref):
        for prefix in host_prefixes:
            prefix = prefix.rstrip("/")
            if ref.startswith(prefix + "/"):
                ref = ref[len(prefix):]
                break
        else:
            return None
        ref = urlsplit(ref).path

    uploads_prefix = "/" + UPLOADS_DIR + "/"
    if ref.startswith(uploads_prefix):
        return os.path.join(upload_root, *ref.lstrip("/").split("/"))

    if os.path.isabs(ref):
        return ref

    if ref.startswith(UPLOADS_DIR + "/"):
        return os.path.join(upload_root, *ref.split("/"))

    return os.path.join(upload_root, UPLOADS_DIR, *ref.split("/"))
