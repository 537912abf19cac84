from dataclasses import dataclass, field
from fractions import Fraction


@dataclass(frozen=True)
class FormatParameters:
    sample_rate: int
    channels: int
    bits_per_sample: int

    @property
    def bytes_per_sample(self) -> int:
        return self.bits_per_sample // 8

    @property
    def block_align(self) -> int:
        return self.channels * self.bytes_per_sample

    @property
    def byte_rate(self) -> int:
        return self.sample_rate * self.block_align


@dataclass(frozen=True)
class ChunkDescriptor:
    index: int              # 0-based position in the plan
    start_time: Fraction    # seconds from stream start
    end_time: Fraction
    start_packet: int       # half-open packet range [start_packet, end_packet)
    end_packet: int

    @property
    def duration(self) -> Fraction:
        return self.end_time - self.start_time

    @property
    def packet_count(self) -> int:
        return self.end_packet - self.start_packet


@dataclass
class SplitOptions:
    input_path: str
    chunk_duration: float          # seconds
    output_dir: str
    prefix: str
    packet_frames: int = 1152
    verbose: bool = True


@dataclass
class SplitResult:
    chunk_count: int
    total_duration: Fraction       # seconds
    output_files: list[str]
    chunks: list[ChunkDescriptor] = field(default_factory=list)
    format: FormatParameters | None = None
