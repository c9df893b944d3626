"""Icon collaborator: inline markup for cached application icons."""

import base64
from pathlib import Path
from typing import Optional

from markupsafe import Markup

from ._util import debug
from .schema import NO_ICON

_MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
}

# Keep the report a reasonable size
_MAX_ICON_BYTES = 256 * 1024


class DirectoryIconResolver:
    """Resolve <app id>.<ext> files in a directory of previously downloaded icons."""

    def __init__(self, icons_dir: Path):
        self.icons_dir = Path(icons_dir)

    def _find(self, app_id: str) -> Optional[Path]:
        for suffix in _MIME_TYPES:
            p = self.icons_dir / f"{app_id}{suffix}"
            if p.is_file():
                return p
        return None

    def __call__(self, app_id: str) -> str:
        p = self._find(app_id)
        if p is None:
            return NO_ICON
        try:
            raw = p.read_bytes()
        except OSError as exc:
            debug("icons", f"cannot read {p}: {exc}")
            return NO_ICON
        if not raw or len(raw) > _MAX_ICON_BYTES:
            debug("icons", f"skipping {p} ({len(raw)} bytes)")
            return NO_ICON
        data = base64.b64encode(raw).decode("ascii")
        return str(Markup('<img class="app-icon" src="data:{};base64,{}" alt="">').format(
            _MIME_TYPES[p.suffix], data,
        ))
