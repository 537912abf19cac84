from decimal import Decimal
from fractions import Fraction
from typing import Sequence

from pipeline.models import ChunkDescriptor


def to_seconds(value: float | int | str | Fraction | Decimal) -> Fraction:
    """
    Exact seconds for a user-supplied duration. Floats go through their
    shortest decimal repr so 0.1 means one tenth, not its binary neighbour.
    """
    if isinstance(value, (Fraction, Decimal, int)):
        return Fraction(value)
    return Fraction(str(value))


def plan_chunks(
    packet_times: Sequence[Fraction],
    chunk_duration: float | Fraction,
) -> list[ChunkDescriptor]:
    """
    Group packets into consecutive chunks of at least `chunk_duration` seconds.

    Each chunk keeps taking packets while the time before the next packet is
    still short of the target, so the packet that crosses the target stays in
    the chunk. Only the last chunk may come out shorter.
    """
    target_duration = to_seconds(chunk_duration)
    if target_duration <= 0:
        raise ValueError("chunk_duration must be positive")

    num_packets = len(packet_times)
    chunks: list[ChunkDescriptor] = []
    chunk_start_packet = 0
    chunk_start_time = Fraction(0)

    while chunk_start_packet < num_packets:
        target_end_time = chunk_start_time + target_duration

        chunk_end_packet = chunk_start_packet
        while chunk_end_packet < num_packets and (
            chunk_end_packet == chunk_start_packet
            or packet_times[chunk_end_packet - 1] < target_end_time
        ):
            chunk_end_packet += 1

        if chunk_end_packet == chunk_start_packet:
            chunk_end_packet = chunk_start_packet + 1

        # packet_times[-1] is the stream total, so exhausted chunks end there too
        chunk_end_time = packet_times[chunk_end_packet - 1]

        chunks.append(
            ChunkDescriptor(
                index=len(chunks),
                start_time=chunk_start_time,
                end_time=chunk_end_time,
                start_packet=chunk_start_packet,
                end_packet=chunk_end_packet,
            )
        )

        chunk_start_packet = chunk_end_packet
        chunk_start_time = chunk_end_time

    return chunks
