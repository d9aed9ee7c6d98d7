"""Exceptions raised by the timer-start parsing engine."""


class TimerStartError(ValueError):
    """Base class for all timer-start parsing and resolution errors."""

    pass


class TimerStartArgumentError(TimerStartError):
    """Raised when a required input (text or locale) is missing.

    Example:
        Calling parse_timer_start(None, "en-US") raises this exception.
    """

    pass


class TimerStartFormatError(TimerStartError):
    """Raised when the input text matches no supported grammar.

    This is the terminal parse failure: every duration and date-time
    candidate was tried and none of them matched the whole string.
    """

    pass


class TokenValidityError(TimerStartError):
    """Raised when a token is resolved or formatted while invalid.

    A token can be parsed successfully and still be invalid, for example a
    time with minute 75. This exception is also raised when a duration does
    not end strictly after its start, or when no future instant exists for a
    date-time token.
    """

    pass


# Errors that abandon a single candidate or formatting attempt without
# aborting the caller.
RECOVERABLE_ERRORS: tuple[type[Exception], ...] = (ValueError, OverflowError, KeyError)
