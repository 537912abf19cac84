from pydantic import BaseModel

from pipeline.models import ChunkDescriptor, SplitResult


class ErrorResponse(BaseModel):
    code: str
    message: str


class FormatReport(BaseModel):
    sample_rate: int
    channels: int
    bits_per_sample: int


class ChunkReport(BaseModel):
    index: int
    path: str
    start_seconds: float
    end_seconds: float
    duration_seconds: float
    packets: int

    @classmethod
    def from_chunk(cls, chunk: ChunkDescriptor, path: str) -> "ChunkReport":
        return cls(
            index=chunk.index + 1,
            path=path,
            start_seconds=float(chunk.start_time),
            end_seconds=float(chunk.end_time),
            duration_seconds=float(chunk.duration),
            packets=chunk.packet_count,
        )


class SplitReport(BaseModel):
    chunk_count: int
    total_duration_seconds: float
    output_files: list[str]
    format: FormatReport | None = None
    chunks: list[ChunkReport] = []

    @classmethod
    def from_result(cls, result: SplitResult) -> "SplitReport":
        fmt = None
        if result.format is not None:
            fmt = FormatReport(
                sample_rate=result.format.sample_rate,
                channels=result.format.channels,
                bits_per_sample=result.format.bits_per_sample,
            )

        return cls(
            chunk_count=result.chunk_count,
            total_duration_seconds=float(result.total_duration),
            output_files=list(result.output_files),
            format=fmt,
            chunks=[
                ChunkReport.from_chunk(chunk, path)
                for chunk, path in zip(result.chunks, result.output_files)
            ],
        )
