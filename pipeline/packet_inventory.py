from dataclasses import dataclass
from fractions import Fraction

from pipeline.errors import EmptyStreamError, MissingTimeBaseError, NoDefaultTrackError
from sources.audio_packet import AudioPacket
from sources.media_format import MediaFormat, Track


@dataclass
class PacketInventory:
    packets: list[AudioPacket]
    packet_times: list[Fraction]   # cumulative end time of each packet, seconds

    def __len__(self) -> int:
        return len(self.packets)

    @property
    def total_duration(self) -> Fraction:
        if not self.packet_times:
            return Fraction(0)
        return self.packet_times[-1]

    def payloads(self, start_packet: int, end_packet: int) -> list[bytes]:
        return [packet.data for packet in self.packets[start_packet:end_packet]]


def resolve_track(media_format: MediaFormat) -> tuple[Track, Fraction]:
    track = media_format.default_track()
    if track is None:
        raise NoDefaultTrackError("No default track found")

    if track.time_base is None:
        raise MissingTimeBaseError("No time base found")

    return track, Fraction(track.time_base)


def build_inventory(media_format: MediaFormat, time_base: Fraction) -> PacketInventory:
    """
    Drain the source and record every packet with its cumulative end time.

    Durations are summed as whole frames and scaled by the time base once per
    packet, so long files accumulate no rounding drift.
    """
    packets: list[AudioPacket] = []
    packet_times: list[Fraction] = []
    total_frames = 0

    while True:
        packet = media_format.next_packet()
        if packet is None:
            break

        total_frames += int(packet.duration)
        packet_times.append(total_frames * time_base)
        packets.append(packet)

    if not packets:
        raise EmptyStreamError("No audio packets found")

    return PacketInventory(
        packets=packets,
        packet_times=packet_times,
    )
