"""Static file lookup under the deployment root."""
from __future__ import annotations
import mimetypes
from pathlib import Path

TEXT_TYPES = {
    ".html": "text/html; charset=utf-8",
    ".js": "text/javascript; charset=utf-8",
    ".css": "text/css; charset=utf-8",
}


def resolve_static(root: str | Path, url_path: str) -> Path | None:
    """
    Map a URL path to a file under `root`.

    Returns None for anything that resolves outside the root, names a
    dot-file or dot-directory (.env, .git), contains a NUL byte, or is not
    a regular file.
    """
    base = Path(root).resolve()
    parts = [p for p in url_path.replace("\\", "/").split("/") if p and p != "."]
    if any(p.startswith(".") or "\x00" in p for p in parts):
        return None
    candidate = base.joinpath(*parts).resolve() if parts else base
    try:
        candidate.relative_to(base)
    except ValueError:
        return None
    if candidate == base or not candidate.is_file():
        return None
    return candidate


def content_type(path: Path) -> str:
    ext = path.suffix.lower()
    if ext in TEXT_TYPES:
        return TEXT_TYPES[ext]
    guessed, _ = mimetypes.guess_type(path.name)
    return guessed or "application/octet-stream"
