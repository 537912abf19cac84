from pipeline.models import FormatParameters
from sources.media_format import CodecParameters

DEFAULT_SAMPLE_RATE = 44100
DEFAULT_CHANNELS = 2
DEFAULT_BITS_PER_SAMPLE = 16


def resolve_format(codec_params: CodecParameters) -> FormatParameters:
    """
    Pick sample rate, channel count and bit depth out of the demuxer's codec
    parameters. Absent fields fall back to 44.1 kHz stereo 16-bit; present
    values are passed through as-is, even zero.
    """
    sample_rate = codec_params.sample_rate
    channels = codec_params.channels
    bits_per_sample = codec_params.bits_per_sample

    return FormatParameters(
        sample_rate=DEFAULT_SAMPLE_RATE if sample_rate is None else int(sample_rate),
        channels=DEFAULT_CHANNELS if channels is None else int(channels),
        bits_per_sample=DEFAULT_BITS_PER_SAMPLE if bits_per_sample is None else int(bits_per_sample),
    )
