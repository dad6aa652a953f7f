"""Errors raised by the TF-IDF feature pipeline"""


class PreconditionViolation(RuntimeError):
    """Operation called in a state that does not allow it (e.g. transform before fit)"""


class DimensionMismatch(ValueError):
    """Term-frequency matrix and IDF vector disagree on the number of terms"""
