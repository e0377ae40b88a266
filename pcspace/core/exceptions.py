"""Custom exceptions for pcspace.

Configuration and shape errors abort a feature-space run before any result
is produced. Per-class degeneracies are not errors; they are logged.
"""


class PCSpaceError(Exception):
    """Base exception class for all pcspace errors."""

    pass


class ConfigurationError(PCSpaceError):
    """Raised when the run cannot be configured from the given inputs.

    Covers unknown multiple-testing methods, out-of-range thresholds, a
    missing PCA or explained-variance decomposition, a label field that is
    not present in the metadata, and class names that collide after
    sanitisation.

    Examples
    --------
    >>> from pcspace.core.exceptions import ConfigurationError
    >>> raise ConfigurationError("Invalid multiple testing correction method: 'foo'")
    """

    pass


class DataError(PCSpaceError):
    """Raised when the input data cannot be used as given."""

    pass


class DataShapeError(DataError):
    """Raised when inputs disagree in shape or content.

    For example when the embedding and the labels have different numbers of
    observations, or a requested positive class is not one of the levels.
    """

    pass
