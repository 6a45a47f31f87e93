import logging
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "random_lofi_track.wav"


class AudioIO:
    @staticmethod
    def write_bytes(buffer: bytes, path: Union[str, Path]) -> Path:
        """Writes an encoded container to disk in one shot. OSError propagates to the caller."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(buffer)
        logger.info("Wrote %d bytes to %s", len(buffer), path)
        return path

    @staticmethod
    def read_bytes(path: Union[str, Path]) -> bytes:
        return Path(path).read_bytes()
