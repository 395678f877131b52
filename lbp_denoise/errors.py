class DenoiseError(Exception):
    """Base class for every failure raised by the denoising engine."""


class InvalidInputError(DenoiseError, ValueError):
    # empty / non-2D / non-binary grids, bad alphabet, bad counts
    pass


class DimensionMismatchError(DenoiseError, ValueError):
    pass


class InternalConsistencyError(DenoiseError, RuntimeError):
    """
    A computed energy or message is non-positive (or NaN).
    Means the energy constants are misconfigured; the run cannot continue.
    """
