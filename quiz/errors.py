"""Exceptions raised by the quiz engine."""


class QuizError(Exception):
    """Base class for quiz engine failures surfaced to callers."""


class EmptyVocabularyPoolError(QuizError):
    """No vocabulary is available, so no questions can be produced for a level."""
