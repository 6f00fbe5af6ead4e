"""Atomic file persistence for generated stylesheets."""

from __future__ import annotations

from pathlib import Path

from PySide6.QtCore import QIODevice, QSaveFile


def write_atomic(path: Path, data: bytes) -> Path:
    """Replace ``path`` with ``data`` so readers never see a partial file.

    QSaveFile writes to a temporary file next to the target and renames it
    over the destination on commit.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    handle = QSaveFile(str(path))
    if not handle.open(QIODevice.OpenModeFlag.WriteOnly):
        raise OSError(f"Unable to open {path} for writing: {handle.errorString()}")
    if handle.write(data) != len(data):
        error = handle.errorString()
        handle.cancelWriting()
        handle.commit()
        raise OSError(f"Unable to write {path}: {error}")
    if not handle.commit():
        raise OSError(f"Unable to commit {path}: {handle.errorString()}")
    return path
