"""archgap — architecture gap analysis for C# codebases."""

__version__ = "0.1.0"
