"""Zip container assembly for deck packages."""

import io
import json
import logging
import zipfile
from typing import Dict, Sequence

from ..config import Config
from ..exceptions import PackagingError
from ..models import MediaSlot

logger = logging.getLogger(__name__)


class ContainerWriter:
    """
    Write the package archive.

    Layout:
        collection.anki2  - SQLite collection database
        0, 1, 2, ...      - media payloads, named by slot index
        media             - JSON manifest {"0": "0.mp3", ...}
    """

    def __init__(self, compression_level: int = Config.COMPRESSION_LEVEL) -> None:
        self.compression_level = compression_level

    def write(self, database: bytes, slots: Sequence[MediaSlot], manifest: Dict[str, str]) -> bytes:
        """
        Assemble the archive in memory.

        Args:
            database: Serialized collection database
            slots: Media payloads in slot order
            manifest: Slot name to filename mapping

        Returns:
            The complete zip archive

        Raises:
            PackagingError: Inconsistent media set or any archive I/O failure
        """
        if not database:
            raise PackagingError("Database image is empty")
        self._check_media(slots, manifest)

        buffer = io.BytesIO()
        try:
            with zipfile.ZipFile(
                buffer,
                "w",
                compression=zipfile.ZIP_DEFLATED,
                compresslevel=self.compression_level,
            ) as archive:
                archive.writestr(Config.DATABASE_NAME, database)
                for slot in slots:
                    archive.writestr(str(slot.index), slot.payload)
                archive.writestr(Config.MEDIA_MANIFEST_NAME, json.dumps(manifest))
        except (OSError, zipfile.BadZipFile, zipfile.LargeZipFile, ValueError) as e:
            buffer.close()
            raise PackagingError(f"Failed to create archive: {e}") from e

        data = buffer.getvalue()
        buffer.close()
        logger.info("Archive written: %d media file(s), %d bytes", len(slots), len(data))
        return data

    @staticmethod
    def _check_media(slots: Sequence[MediaSlot], manifest: Dict[str, str]) -> None:
        names = [str(slot.index) for slot in slots]
        if len(set(names)) != len(names):
            raise PackagingError("Duplicate media slot index")
        if set(names) != set(manifest):
            raise PackagingError(
                "Media manifest does not match payloads",
                {"manifest": sorted(manifest), "payloads": sorted(names)},
            )
        if names != [str(i) for i in range(len(names))]:
            raise PackagingError("Media slots are not contiguous from 0", {"slots": names})
        for slot in slots:
            if not slot.payload:
                raise PackagingError("Media slot has no payload", {"slot": slot.index})
            if manifest[str(slot.index)] != slot.filename:
                raise PackagingError("Manifest filename mismatch", {"slot": slot.index})
