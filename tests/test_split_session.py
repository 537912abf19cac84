import contextlib
import io
import os
import struct
import tempfile
import unittest
from fractions import Fraction
from pathlib import Path
import sys

import numpy as np
import soundfile as sf

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from pipeline.errors import EmptyStreamError, InputOpenError
from pipeline.models import SplitOptions
from pipeline.split_session import SplitSession, chunk_filename, minutes_to_seconds, split_wav
from sources.audio_packet import AudioPacket
from sources.media_format import CodecParameters, MediaFormat, Track


class FakeFormat(MediaFormat):
    def __init__(self, packets: list[AudioPacket], codec_params: CodecParameters, time_base: Fraction):
        self._packets = iter(packets)
        self._track = Track(codec_params=codec_params, time_base=time_base)
        self.closed = False

    def default_track(self):
        return self._track

    def next_packet(self):
        return next(self._packets, None)

    def close(self) -> None:
        self.closed = True


def tenth_second_packets(count: int = 100) -> list[AudioPacket]:
    # 800 frames at 8 kHz, stereo 16-bit
    return [AudioPacket(data=bytes([i % 256]) * 3200, duration=800) for i in range(count)]


def read_header(path: str) -> tuple:
    with open(path, "rb") as f:
        content = f.read()
    fields = struct.unpack("<4sI4s4sIHHIIHH4sI", content[:44])
    return fields, content[44:]


class TestSplitSession(unittest.TestCase):
    def _run_fake(self, tmp: str, codec_params: CodecParameters, packets=None, out="chunks"):
        packets = tenth_second_packets() if packets is None else packets
        opened = []

        def opener(path: str, packet_frames: int) -> MediaFormat:
            fmt = FakeFormat(packets, codec_params, Fraction(1, 8000))
            opened.append(fmt)
            return fmt

        options = SplitOptions(
            input_path="synthetic.wav",
            chunk_duration=3,
            output_dir=os.path.join(tmp, out),
            prefix="part",
            verbose=False,
        )
        result = SplitSession(options, opener=opener).run()
        return result, packets, opened

    def test_splits_ten_seconds_into_four_chunks(self) -> None:
        params = CodecParameters(sample_rate=8000, channels=2, bits_per_sample=16)

        with tempfile.TemporaryDirectory() as tmp:
            result, packets, opened = self._run_fake(tmp, params)

            self.assertEqual(result.chunk_count, 4)
            self.assertEqual(result.total_duration, 10)
            self.assertEqual(
                [os.path.basename(p) for p in result.output_files],
                ["part_001.wav", "part_002.wav", "part_003.wav", "part_004.wav"],
            )
            self.assertTrue(opened[0].closed)

            payload = b""
            for path, chunk in zip(result.output_files, result.chunks):
                fields, data = read_header(path)
                self.assertEqual(fields[1], 36 + len(data))
                self.assertEqual(fields[12], len(data))
                self.assertEqual(len(data), chunk.packet_count * 3200)
                payload += data

            self.assertEqual(payload, b"".join(p.data for p in packets))
            self.assertEqual(float(result.chunks[-1].duration), 1.0)

    def test_missing_format_parameters_use_defaults_in_header(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            result, _, _ = self._run_fake(tmp, CodecParameters())

            fields, _ = read_header(result.output_files[0])
            self.assertEqual(fields[6], 2)       # channels
            self.assertEqual(fields[7], 44100)   # sample rate
            self.assertEqual(fields[10], 16)     # bits per sample
            self.assertEqual(result.format.sample_rate, 44100)

    def test_same_input_gives_identical_files(self) -> None:
        params = CodecParameters(sample_rate=8000, channels=2, bits_per_sample=16)

        with tempfile.TemporaryDirectory() as tmp:
            first, _, _ = self._run_fake(tmp, params, out="a")
            second, _, _ = self._run_fake(tmp, params, out="b")

            for a, b in zip(first.output_files, second.output_files):
                with open(a, "rb") as fa, open(b, "rb") as fb:
                    self.assertEqual(fa.read(), fb.read())

    def test_empty_stream_aborts_and_closes_source(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            opened = []

            def opener(path: str, packet_frames: int) -> MediaFormat:
                fmt = FakeFormat([], CodecParameters(), Fraction(1, 8000))
                opened.append(fmt)
                return fmt

            options = SplitOptions(
                input_path="empty.wav",
                chunk_duration=1,
                output_dir=os.path.join(tmp, "out"),
                prefix="x",
                verbose=False,
            )
            with self.assertRaises(EmptyStreamError):
                SplitSession(options, opener=opener).run()

            self.assertTrue(opened[0].closed)
            self.assertEqual(os.listdir(os.path.join(tmp, "out")), [])

    def test_out_of_range_format_fails_with_value_error(self) -> None:
        params = CodecParameters(sample_rate=1_000_000_000, channels=2, bits_per_sample=32)

        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaisesRegex(ValueError, "byte_rate"):
                self._run_fake(tmp, params)

            self.assertEqual(os.listdir(os.path.join(tmp, "chunks")), [])

    def test_verbose_output_names_codec_and_each_chunk_file(self) -> None:
        params = CodecParameters(codec="PCM_16", sample_rate=8000, channels=2, bits_per_sample=16)
        packets = tenth_second_packets()

        with tempfile.TemporaryDirectory() as tmp:
            options = SplitOptions(
                input_path="synthetic.wav",
                chunk_duration=3,
                output_dir=os.path.join(tmp, "chunks"),
                prefix="part",
                verbose=True,
            )
            session = SplitSession(
                options,
                opener=lambda path, frames: FakeFormat(packets, params, Fraction(1, 8000)),
            )

            stdout = io.StringIO()
            with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(io.StringIO()):
                session.run()

        output = stdout.getvalue()
        self.assertIn("PCM_16", output)
        self.assertIn("Writing chunk 1/4: part_001.wav", output)
        self.assertIn("Writing chunk 4/4: part_004.wav", output)

    def test_real_wav_round_trip(self) -> None:
        rng = np.random.default_rng(3)
        samples = rng.integers(-20000, 20000, size=(16000 * 5 + 123, 1), dtype=np.int16)

        with tempfile.TemporaryDirectory() as tmp:
            src = os.path.join(tmp, "input.wav")
            sf.write(src, samples, 16000, subtype="PCM_16")

            result = split_wav(
                SplitOptions(
                    input_path=src,
                    chunk_duration=2,
                    output_dir=os.path.join(tmp, "nested", "chunks"),
                    prefix="track",
                    packet_frames=1024,
                    verbose=False,
                )
            )

            self.assertEqual(result.chunk_count, 3)
            self.assertAlmostEqual(float(result.total_duration), (16000 * 5 + 123) / 16000)

            pieces = []
            for path in result.output_files:
                data, sr = sf.read(path, dtype="int16", always_2d=True)
                self.assertEqual(sr, 16000)
                pieces.append(data)

            for chunk in result.chunks[:-1]:
                self.assertGreaterEqual(chunk.duration, 2)

            np.testing.assert_array_equal(np.concatenate(pieces), samples)

    def test_missing_input_raises_input_open_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            options = SplitOptions(
                input_path=os.path.join(tmp, "missing.wav"),
                chunk_duration=1,
                output_dir=os.path.join(tmp, "out"),
                prefix="x",
                verbose=False,
            )
            with self.assertRaises(InputOpenError):
                split_wav(options)

    def test_helpers(self) -> None:
        self.assertEqual(chunk_filename("track", 0), "track_001.wav")
        self.assertEqual(chunk_filename("track", 41), "track_042.wav")
        self.assertEqual(minutes_to_seconds(10), 600)


if __name__ == "__main__":
    unittest.main()
