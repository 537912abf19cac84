import os
from typing import Callable

from tqdm import tqdm

from pipeline.chunk_planner import plan_chunks, to_seconds
from pipeline.format_params import resolve_format
from pipeline.models import ChunkDescriptor, FormatParameters, SplitOptions, SplitResult
from pipeline.packet_inventory import PacketInventory, build_inventory, resolve_track
from sources.media_format import MediaFormat
from sources.soundfile_format import probe
from storage.wav_writer import write_wav_chunk


def minutes_to_seconds(minutes: float) -> float:
    return float(minutes) * 60


def chunk_filename(prefix: str, chunk_index: int) -> str:
    """1-indexed, zero-padded to three digits."""
    return f"{prefix}_{chunk_index + 1:03d}.wav"


class SplitSession:
    def __init__(
        self,
        options: SplitOptions,
        opener: Callable[[str, int], MediaFormat] = probe,
    ):
        self.options = options
        self.opener = opener

    def run(self) -> SplitResult:
        """
        Read the whole input, plan chunk boundaries, then write one WAV per chunk.
        """
        opts = self.options
        chunk_seconds = to_seconds(opts.chunk_duration)
        if chunk_seconds <= 0:
            raise ValueError("chunk_duration must be positive")

        self._log(f"🎧 Processing file: {opts.input_path}")
        self._log(
            f"⏱️  Target chunk duration: {float(chunk_seconds):g} seconds "
            f"({float(chunk_seconds) / 60:.2f} minutes)"
        )

        os.makedirs(opts.output_dir, exist_ok=True)

        media_format = self.opener(opts.input_path, opts.packet_frames)
        try:
            track, time_base = resolve_track(media_format)
            codec = track.codec_params.codec or "unknown codec"
            self._log(f"📖 First pass ({codec}): reading packets and calculating timestamps...")
            inventory = build_inventory(media_format, time_base)
        finally:
            media_format.close()

        total_seconds = float(inventory.total_duration)
        self._log(
            f"📦 Found {len(inventory)} packets, total duration: "
            f"{total_seconds:.2f} seconds ({total_seconds / 60:.2f} minutes)"
        )

        self._log("✂️  Second pass: determining chunk boundaries...")
        chunks = plan_chunks(inventory.packet_times, chunk_seconds)
        self._log(f"Splitting into {len(chunks)} chunks:")
        for chunk in chunks:
            duration = float(chunk.duration)
            self._log(
                f"   Chunk {chunk.index + 1} duration: {duration / 60:.2f} minutes "
                f"({duration:.2f} seconds), packets: {chunk.packet_count}"
            )

        params = resolve_format(track.codec_params)
        output_files = self._write_chunks(inventory, chunks, params)

        self._log(f"✅ Split into {len(chunks)} chunks in directory: {opts.output_dir}")

        return SplitResult(
            chunk_count=len(chunks),
            total_duration=inventory.total_duration,
            output_files=output_files,
            chunks=chunks,
            format=params,
        )

    def _write_chunks(
        self,
        inventory: PacketInventory,
        chunks: list[ChunkDescriptor],
        params: FormatParameters,
    ) -> list[str]:
        output_files: list[str] = []

        progress = tqdm(chunks, unit="chunk", disable=not self.options.verbose)
        for chunk in progress:
            filename = chunk_filename(self.options.prefix, chunk.index)
            output_path = os.path.join(self.options.output_dir, filename)

            if self.options.verbose:
                duration = float(chunk.duration)
                tqdm.write(
                    f"💾 Writing chunk {chunk.index + 1}/{len(chunks)}: {filename} "
                    f"(duration: {duration / 60:.2f} minutes, {chunk.packet_count} packets)"
                )
                progress.set_postfix_str(filename)

            write_wav_chunk(
                output_path,
                params,
                inventory.payloads(chunk.start_packet, chunk.end_packet),
            )
            output_files.append(output_path)

        return output_files

    def _log(self, message: str) -> None:
        if self.options.verbose:
            print(message)


def split_wav(options: SplitOptions) -> SplitResult:
    return SplitSession(options).run()
