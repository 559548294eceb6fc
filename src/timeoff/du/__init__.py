"""Dialogue understanding: recognizers for intents and dates."""

from timeoff.du.recognizer import DSPyRecognizer, NullRecognizer, create_recognizer

__all__ = ["DSPyRecognizer", "NullRecognizer", "create_recognizer"]
