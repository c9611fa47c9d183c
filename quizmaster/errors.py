"""Error taxonomy for the quiz engine and its persistence boundary."""


class QuizError(Exception):
    """Base class for quiz errors."""


class InvalidArgument(QuizError, ValueError):
    """A core function was called with arguments it does not accept."""


class DataUnavailable(QuizError):
    """A question pool could not be read from the remote store."""


class PersistenceFailure(QuizError):
    """A completed attempt or an attempt-count increment could not be written."""
