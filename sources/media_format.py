# sources/media_format.py
from abc import ABC, abstractmethod
from dataclasses import dataclass
from fractions import Fraction
from typing import Optional

from sources.audio_packet import AudioPacket


@dataclass(frozen=True)
class CodecParameters:
    codec: str | None = None
    sample_rate: int | None = None
    channels: int | None = None
    bits_per_sample: int | None = None


@dataclass(frozen=True)
class Track:
    codec_params: CodecParameters
    time_base: Fraction | None


class MediaFormat(ABC):
    @abstractmethod
    def default_track(self) -> Optional[Track]:
        """
        Return the track packets are read from, or None if the container has none.
        """
        pass

    @abstractmethod
    def next_packet(self) -> Optional[AudioPacket]:
        """
        Return the next packet of the default track.
        Return None at end of stream.
        """
        pass

    def close(self) -> None:
        """Release the underlying file handle"""
        pass
