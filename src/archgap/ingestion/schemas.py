"""Pydantic models for the ingestion data flow."""

from pydantic import BaseModel, Field


class SourceFile(BaseModel):
    """One source file handed to the analyzer."""

    path: str
    text: str


class PackageReference(BaseModel):
    """A dependency declared by a project file."""

    name: str
    version: str = ""

    @property
    def descriptor(self) -> str:
        """``name (version)`` as shown in the architecture summary."""
        return f"{self.name} ({self.version})"


class ProjectDescriptor(BaseModel):
    """Output of project discovery — one build unit.

    ``load_error`` is set when the project file could not be read;
    such descriptors contribute nothing to the analysis.
    """

    path: str
    target_framework: str | None = None
    dependencies: list[PackageReference] = Field(
        default_factory=lambda: list[PackageReference]()
    )
    load_error: str | None = None
