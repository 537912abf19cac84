# sources/audio_packet.py
from dataclasses import dataclass


@dataclass(frozen=True)
class AudioPacket:
    data: bytes     # raw little-endian PCM frames
    duration: int   # frame count, in the track's time base
