"""
This file contains custom, application-specific exceptions.
"""

class VotingError(Exception):
    """Base class for every error raised by the voting core."""
    pass

class WeekNotFoundError(VotingError):
    """Raised when a voting week ID is not found in the database."""
    pass

class InvalidSlotReferenceError(VotingError):
    """Raised when a submitted time slot does not belong to the active week."""
    pass

class InvalidPreferredSlotError(VotingError):
    """Raised when a preferred time slot is not among the selected time slots."""
    pass

class SlotNotFoundError(InvalidPreferredSlotError):
    """Raised when some preferred time slot IDs could not be resolved."""
    pass

class ConcurrentVoteError(VotingError):
    """Raised when another request created the same voter's vote first."""
    pass
