"""Exception hierarchy for archgap.

Per-file problems raised here are caught by the analyzer and recorded
in the report metadata. Only a missing grammar aborts a run.
"""


class ArchGapError(Exception):
    """Base exception for all archgap errors."""


class SourceReadError(ArchGapError):
    """A source file could not be read (missing, unreadable, too large)."""


class SourceDecodeError(ArchGapError):
    """Source text is not valid UTF-8 and cannot be parsed."""


class ProjectDescriptorError(ArchGapError):
    """A project file is missing or is not well-formed XML."""


class GrammarUnavailableError(ArchGapError):
    """The tree-sitter C# grammar package could not be loaded."""
