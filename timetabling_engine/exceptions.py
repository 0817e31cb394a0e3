# timetabling_engine/exceptions.py

"""Exceptions raised by the timetabling engine."""


class SchedulingEngineError(Exception):
    """Base class for timetabling engine errors"""


class ProblemConfigurationError(SchedulingEngineError):
    """
    The problem data or the engine settings are malformed.

    Raised as soon as the inconsistency is detected and never retried: the
    search cannot recover from an index mismatch, a missing slot or an unknown
    class referenced by a rule.
    """
