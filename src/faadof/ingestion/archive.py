from __future__ import annotations

import io
import zipfile
from pathlib import Path
from typing import Union

DOF_ENTRY_NAME = "DOF.DAT"


class DofArchiveError(RuntimeError):
    """Raised when a DOF archive cannot be opened or holds no DOF data."""

    recovery_suggestion = "Verify the file is a valid ZIP archive from the FAA."


class InvalidArchiveError(DofArchiveError):
    pass


class DofNotFoundInArchiveError(DofArchiveError):
    pass


def _select_entry(archive: zipfile.ZipFile) -> zipfile.ZipInfo:
    entries = [info for info in archive.infolist() if not info.is_dir()]
    # Prefer DOF.DAT (any directory, any case), then the first .DAT entry.
    for info in entries:
        if Path(info.filename).name.upper() == DOF_ENTRY_NAME:
            return info
    for info in entries:
        if info.filename.upper().endswith(".DAT"):
            return info
    raise DofNotFoundInArchiveError("The ZIP archive does not contain a DOF.DAT file.")


def extract_dof_data(source: Union[bytes, str, Path]) -> bytes:
    """Return the raw bytes of the DOF data file inside a ZIP archive (path or archive bytes)."""

    handle = io.BytesIO(source) if isinstance(source, (bytes, bytearray)) else Path(source)
    try:
        with zipfile.ZipFile(handle) as archive:
            return archive.read(_select_entry(archive))
    except zipfile.BadZipFile as exc:
        raise InvalidArchiveError(
            "The file is not a valid ZIP archive or may be corrupted."
        ) from exc
