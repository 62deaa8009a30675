"""Errors raised by the live MEA client."""


class InvalidSelector(ValueError):
    """The MEA selector is not an integer in the range 1-4."""

    def __init__(self, selector):
        """Initialize the exception.

        Args:
            selector: The rejected selector value.
        """
        self.selector = selector
        self.message = f"MEA ID must be an integer in the range 1-4, got {selector!r}"
        super().__init__(self.message)


class MalformedFrame(ValueError):
    """The received buffer does not match the expected frame layout."""

    pass


class SessionConnectionError(ConnectionError):
    """The transport failed to connect or dropped during a session."""

    pass
