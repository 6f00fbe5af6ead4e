"""Theme resource bundle registration and lookup."""

from __future__ import annotations

import asyncio
from pathlib import Path

from PySide6.QtCore import QFile, QIODevice, QResource

from copyous.errors import ErrorCode, ThemeError
from copyous.ui.themes.constants import RESOURCE_PREFIX


class ResourceBundle:
    """Read-only set of templates and pre-built stylesheets.

    The source is either a compiled Qt resource file (``.rcc``), mounted under
    ``RESOURCE_PREFIX`` while registered, or a plain directory used as-is.
    """

    def __init__(self, source: Path, prefix: str = RESOURCE_PREFIX) -> None:
        self._source = source
        self._prefix = "/" + prefix.strip("/")
        self._registered = False

    @property
    def source(self) -> Path:
        return self._source

    @property
    def registered(self) -> bool:
        return self._registered

    @property
    def is_compiled(self) -> bool:
        return self._source.is_file()

    def register(self) -> None:
        if self._registered:
            return
        if self.is_compiled:
            if not QResource.registerResource(str(self._source), self._prefix):
                raise ThemeError(ErrorCode.RESOURCE_REGISTER_FAILED, path=self._source)
        elif not self._source.is_dir():
            raise ThemeError(ErrorCode.RESOURCE_NOT_FOUND, path=self._source)
        self._registered = True

    def unregister(self) -> None:
        if not self._registered:
            return
        if self.is_compiled:
            QResource.unregisterResource(str(self._source), self._prefix)
        self._registered = False

    def identity(self, name: str) -> str:
        """Return the stable identity (resource path or file path) of ``name``."""
        if self.is_compiled:
            return f":{self._prefix}/{name}"
        return str(self._source / name)

    def exists(self, name: str) -> bool:
        return self._registered and QFile.exists(self.identity(name))

    async def read_bytes(self, name: str) -> bytes:
        if not self._registered:
            raise ThemeError(
                ErrorCode.RESOURCE_NOT_FOUND,
                message="Resource bundle is not registered.",
                path=self._source,
            )
        return await asyncio.to_thread(read_resource, self.identity(name))


def read_resource(identity: str) -> bytes:
    """Read a resource path (``:/...``) or file path into bytes."""
    handle = QFile(identity)
    if not handle.exists():
        raise ThemeError(ErrorCode.RESOURCE_NOT_FOUND, path=Path(identity))
    if not handle.open(QIODevice.OpenModeFlag.ReadOnly):
        raise ThemeError(
            ErrorCode.FILE_READ_FAILED,
            path=Path(identity),
            details={"original": handle.errorString()},
        )
    try:
        return handle.readAll().data()
    finally:
        handle.close()
