"""Database models package for Wordmem."""

from ..core.extensions import db

from .user import User
from .vocabulary import Word, Wordbook
from .training import SessionWord, TrainingSession, TrainingStats
from .errors import ErrorRoundWord, ErrorTrainingRound, WordError

__all__ = [
    'db',
    'User',
    'Wordbook',
    'Word',
    'TrainingSession',
    'SessionWord',
    'TrainingStats',
    'WordError',
    'ErrorTrainingRound',
    'ErrorRoundWord',
]
