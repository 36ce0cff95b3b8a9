"""Exceptions raised by featurekit."""


class NotAnalysedError(RuntimeError):
    """A query was made on an analyser before analyse_image() was called."""


class DegenerateTransformError(ArithmeticError):
    """A projective transform mapped a point onto the plane at infinity."""
