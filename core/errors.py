"""Domain exceptions raised by the session and event stores."""


class ConvoLogError(Exception):
    """Base class for all service errors."""


class SessionNotFoundError(ConvoLogError):
    """Referenced session does not exist."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session {session_id} not found")


class StorageError(ConvoLogError):
    """Storage engine failure that is not a resolvable duplicate-key race.

    The original driver exception is chained as ``__cause__``.
    """
