"""Custom Exceptions for the StepSentence application."""

class StepSentenceError(Exception):
    """Base class for exceptions in this module."""
    pass

class ConfigurationError(StepSentenceError):
    """Exception raised for errors in configuration loading."""
    pass

class SubtitleDecodeError(StepSentenceError):
    """Exception raised when subtitle content cannot be decoded as UTF-8 or UTF-16."""
    pass

class ProjectCreationError(StepSentenceError):
    """Exception raised when a project cannot be built from the given inputs."""
    pass

class ProjectStoreError(StepSentenceError):
    """Exception raised for errors while reading or writing stored projects."""
    pass

class ProjectNotFoundError(ProjectStoreError):
    """Exception raised when a project id is not present in the store."""
    pass

class AudioExportError(StepSentenceError):
    """Exception raised for errors during audio composition or clipping."""
    pass

class MissingRecordingError(AudioExportError):
    """Exception raised when a sentence has no recording to export."""

    def __init__(self, sentence_text: str):
        self.sentence_text = sentence_text
        super().__init__(f"Sentence \"{sentence_text}\" has no recording.")

class FormattingError(StepSentenceError):
    """Exception raised for errors during subtitle formatting."""
    pass

class FileSystemError(StepSentenceError):
    """Exception raised for file system related errors (permissions, not found etc)."""
    pass
