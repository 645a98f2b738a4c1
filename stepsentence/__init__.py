"""StepSentence: sentence-by-sentence language practice from text or audio + subtitles."""

__version__ = "0.1.0"
