"""
Buffer loader for SonicMind.

Decodes audio files into SampleBuffers for the analysis core. The core
itself never touches container formats; this is the collaborator that
does.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Set

import librosa
import numpy as np
import soundfile as sf

from sonicmind.core.models import SampleBuffer
from sonicmind.utils.errors import AudioLoadError, FileTooLargeError, UnsupportedFormatError


# Constants
SUPPORTED_FORMATS: Set[str] = {'.wav', '.aiff', '.aif', '.flac', '.ogg', '.mp3'}
MAX_FILE_SIZE: int = 524288000  # 500 MB

logger = logging.getLogger(__name__)


class BufferLoader:
    """
    Loads audio files and creates SampleBuffer instances.

    Thread-safe and stateless - can be used concurrently.
    """

    def __init__(
        self,
        target_sr: Optional[int] = None,
        max_file_size: int = MAX_FILE_SIZE,
        supported_formats: Optional[Iterable[str]] = None,
    ):
        """
        Initialize loader with configuration.

        Args:
            target_sr: Resample to this rate; None keeps the native rate
            max_file_size: Maximum file size in bytes
            supported_formats: Accepted file suffixes (with leading dot)
        """
        self.target_sr = target_sr
        self.max_file_size = max_file_size
        self.supported_suffixes: Set[str] = {
            s.lower() for s in (supported_formats or SUPPORTED_FORMATS)
        }

    def load(self, file_path: Path) -> SampleBuffer:
        """
        Load audio file and create SampleBuffer.

        Args:
            file_path: Path to audio file

        Returns:
            SampleBuffer: Decoded channels, sample rate and duration

        Raises:
            FileNotFoundError: File doesn't exist
            UnsupportedFormatError: File format not supported
            FileTooLargeError: File exceeds size limit
            AudioLoadError: Audio data could not be decoded or is empty
        """
        file_path = Path(file_path)

        self._validate_file(file_path)
        self._log_metadata(file_path)

        audio_data, sample_rate = self._load_audio_data(file_path)
        audio_data = self._validate_audio_data(audio_data, file_path)

        return SampleBuffer.from_array(
            audio_data,
            sample_rate=sample_rate,
            source=file_path.name,
        )

    def _validate_file(self, file_path: Path) -> None:
        """Validate file exists, has supported format, and is within size limit."""
        if not file_path.exists():
            raise FileNotFoundError(f"Audio file not found: {file_path}")

        suffix = file_path.suffix.lower()
        if suffix not in self.supported_suffixes:
            raise UnsupportedFormatError(
                f"Format {suffix} not supported. "
                f"Supported formats: {', '.join(sorted(self.supported_suffixes))}",
                format=suffix
            )

        file_size = file_path.stat().st_size
        if file_size > self.max_file_size:
            raise FileTooLargeError(
                f"File too large: {file_size / 1024 / 1024:.1f} MB. "
                f"Maximum: {self.max_file_size / 1024 / 1024:.1f} MB",
                file_size=file_size,
                max_size=self.max_file_size
            )

    def _validate_audio_data(
        self, audio_data: np.ndarray, file_path: Path
    ) -> np.ndarray:
        """Reject empty audio, warn on silence, normalize clipping."""
        if audio_data.size == 0:
            raise AudioLoadError(f"Audio file is empty: {file_path}", file_path=str(file_path))

        rms = np.sqrt(np.mean(audio_data ** 2))
        if rms < 1e-6:
            logger.warning(f"Audio appears to be silent: {file_path}")

        max_abs = np.max(np.abs(audio_data))
        if max_abs > 1.0:
            logger.warning(
                f"Audio contains clipping (max: {max_abs:.2f}), normalizing: {file_path}"
            )
            audio_data = audio_data / max_abs

        return audio_data

    def _log_metadata(self, file_path: Path) -> None:
        """Log the native stream format before decoding."""
        try:
            info = sf.info(str(file_path))
        except Exception as e:
            # soundfile can't read some containers (e.g. MP3 on older libsndfile)
            logger.warning(f"Could not read metadata with soundfile: {e}")
            return

        logger.info(
            f"Loading audio: {info.samplerate} Hz, {info.channels} ch, {info.subtype}"
        )

    def _load_audio_data(self, file_path: Path):
        """Decode to float32, shaped (samples,) for mono or (channels, samples)."""
        try:
            return librosa.load(
                str(file_path),
                sr=self.target_sr,
                mono=False,
                dtype=np.float32
            )
        except Exception as e:
            raise AudioLoadError(
                f"Failed to load audio data from {file_path}: {e}",
                file_path=str(file_path)
            ) from e


class AsyncBufferLoader:
    """Async wrapper around BufferLoader for non-blocking I/O."""

    def __init__(
        self,
        loader: Optional[BufferLoader] = None,
        executor: Optional[ThreadPoolExecutor] = None
    ):
        """
        Initialize async loader.

        Args:
            loader: BufferLoader instance (creates default if None)
            executor: ThreadPoolExecutor (creates default if None)
        """
        self.loader = loader or BufferLoader()
        self.executor = executor or ThreadPoolExecutor(max_workers=4)

    async def load(self, file_path: Path) -> SampleBuffer:
        """Load audio asynchronously."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            self.executor,
            self.loader.load,
            file_path
        )

    def shutdown(self) -> None:
        """Shutdown the executor."""
        self.executor.shutdown(wait=True)


def create_buffer_loader(config: Optional[Dict[str, Any]] = None) -> BufferLoader:
    """
    Factory function to create BufferLoader with configuration.

    Args:
        config: Optional full configuration dict; reads its ``loader`` section

    Returns:
        BufferLoader: Configured loader instance
    """
    section = (config or {}).get('loader', {}) or {}

    return BufferLoader(
        target_sr=section.get('target_sample_rate'),
        max_file_size=section.get('max_file_size', MAX_FILE_SIZE),
        supported_formats=section.get('supported_formats'),
    )
