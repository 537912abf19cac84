# sources/soundfile_format.py
from fractions import Fraction
from typing import Optional

import numpy as np
import soundfile as sf

from pipeline.errors import InputOpenError, ProbeError, UnsupportedCodecError
from sources.audio_packet import AudioPacket
from sources.media_format import CodecParameters, MediaFormat, Track

DEFAULT_PACKET_FRAMES = 1152

# libsndfile subtypes whose samples survive an integer read unchanged
PCM_SUBTYPE_BITS = {
    "PCM_U8": 8,
    "PCM_S8": 8,
    "PCM_16": 16,
    "PCM_24": 24,
    "PCM_32": 32,
}


class SoundFileFormat(MediaFormat):
    def __init__(self, handle, audio_path: str, packet_frames: int = DEFAULT_PACKET_FRAMES):
        if packet_frames <= 0:
            handle.close()
            raise ValueError("packet_frames must be positive")

        self.audio_path = audio_path
        self.packet_frames = int(packet_frames)
        self._handle = handle

        try:
            self._file = sf.SoundFile(handle)
        except RuntimeError as exc:
            handle.close()
            raise ProbeError(f"Error probing format of {audio_path}: {exc}") from exc

        subtype = self._file.subtype
        if subtype not in PCM_SUBTYPE_BITS:
            self.close()
            raise UnsupportedCodecError(
                f"Unsupported codec {subtype} in {audio_path}; only integer PCM can be split"
            )

        self.bits_per_sample = PCM_SUBTYPE_BITS[subtype]
        self._dtype = "int16" if self.bits_per_sample <= 16 else "int32"
        self._track = Track(
            codec_params=CodecParameters(
                codec=subtype,
                sample_rate=int(self._file.samplerate),
                channels=int(self._file.channels),
                bits_per_sample=self.bits_per_sample,
            ),
            time_base=Fraction(1, int(self._file.samplerate)),
        )

    def default_track(self) -> Optional[Track]:
        return self._track

    def next_packet(self) -> Optional[AudioPacket]:
        frames = self._file.read(self.packet_frames, dtype=self._dtype, always_2d=True)
        if len(frames) == 0:
            return None

        return AudioPacket(data=self._encode(frames), duration=len(frames))

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()
        self._handle.close()

    def _encode(self, frames: np.ndarray) -> bytes:
        """
        Turn an interleaved (frames, channels) integer block back into
        WAV-native little-endian sample bytes.
        """
        if self.bits_per_sample == 8:
            # libsndfile widens 8-bit samples to int16 as (s << 8); WAV stores them unsigned
            return ((frames >> 8) + 128).astype(np.uint8).tobytes()

        if self.bits_per_sample == 16:
            return frames.astype("<i2").tobytes()

        if self.bits_per_sample == 24:
            # int32 reads carry the 24-bit sample in the top three bytes
            wide = frames.astype("<i4").view(np.uint8).reshape(-1, 4)
            return wide[:, 1:].tobytes()

        return frames.astype("<i4").tobytes()


def probe(audio_path: str, packet_frames: int = DEFAULT_PACKET_FRAMES) -> SoundFileFormat:
    try:
        handle = open(audio_path, "rb")
    except OSError as exc:
        raise InputOpenError(f"Cannot open input file {audio_path}: {exc}") from exc

    return SoundFileFormat(handle, audio_path, packet_frames=packet_frames)
