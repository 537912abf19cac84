class SplitError(Exception):
    pass


class InputOpenError(SplitError):
    pass


class ProbeError(SplitError):
    pass


class UnsupportedCodecError(ProbeError):
    pass


class NoDefaultTrackError(SplitError):
    pass


class MissingTimeBaseError(SplitError):
    pass


class EmptyStreamError(SplitError):
    pass


class OutputCreateError(SplitError):
    pass


class OutputWriteError(SplitError):
    pass
