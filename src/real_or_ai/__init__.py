"""Client for the daily "real photo or AI image?" puzzle."""

from .errors import LeaderboardError, LoadError, QuizError, SubmissionError, TransportError, ValidationError
from .identity import FileIdentityProvider, IdentityProvider, StaticIdentityProvider
from .navigator import Direction, NavigationState, Phase, RoundNavigator
from .puzzle import Accepted, AttemptResult, Choice, ErrorKind, LeaderboardEntry, Puzzle, Rejected, Round
from .session import QuizSession, SessionView
from .submission import SubmissionCoordinator, SubmissionOutcome

__all__ = [
    "Accepted",
    "AttemptResult",
    "Choice",
    "Direction",
    "ErrorKind",
    "FileIdentityProvider",
    "IdentityProvider",
    "LeaderboardEntry",
    "LeaderboardError",
    "LoadError",
    "NavigationState",
    "Phase",
    "Puzzle",
    "QuizError",
    "QuizSession",
    "Rejected",
    "Round",
    "RoundNavigator",
    "SessionView",
    "StaticIdentityProvider",
    "SubmissionCoordinator",
    "SubmissionError",
    "SubmissionOutcome",
    "TransportError",
    "ValidationError",
]
