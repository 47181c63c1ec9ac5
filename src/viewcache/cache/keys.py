"""
Cache key derivation for rendered templates.

A cache entry lives at ``<cache_dir>/<digest>/<template basename>``. The
digest directory keeps entries of the same template apart when they are
cached under different ids.
"""

from __future__ import annotations

import hashlib
import os
from pathlib import Path


def derive_cache_id(template_path: str | Path, cache_id: str | None = None) -> str:
    """Derive the digest directory name for a (cache id, template) pair.

    Args:
        template_path: Path or filename of the template. Only the basename is used.
        cache_id: Optional logical id distinguishing variants of the same template.

    Returns:
        32-character lowercase hex MD5 digest of the filesystem-encoded bytes.
    """
    name = Path(template_path).name
    source = f"{cache_id}{name}" if cache_id else name
    return hashlib.md5(os.fsencode(source)).hexdigest()


def entry_path(
    cache_dir: str | Path,
    template_path: str | Path,
    cache_id: str | None = None,
) -> Path:
    """Build the on-disk path of a cache entry."""
    return Path(cache_dir) / derive_cache_id(template_path, cache_id) / Path(template_path).name
