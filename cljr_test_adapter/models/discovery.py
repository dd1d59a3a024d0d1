"""Models for tests discovered in test-source files."""

from collections.abc import Mapping
from pathlib import Path

from pydantic import Field

from cljr_test_adapter.models.base import Model


class TestFile(Model):
    """A test-source file read from disk."""

    __test__ = False

    path: Path = Field(..., description="Absolute path of the file")
    namespace: str = Field(..., description="Namespace inferred from the file name")
    content: str = Field(..., description="Raw text content")


class DiscoveredTest(Model):
    """A single deftest declaration found inside a test file.

    Two declarations with the same fully-qualified name remain distinct
    identities since they differ by file or line number.
    """

    namespace: str = Field(..., description="Namespace the test belongs to")
    name: str = Field(..., description="Local test name")
    source_file: Path = Field(..., description="File declaring the test")
    line_number: int | None = Field(
        default=None, description="1-based line of the declaration"
    )
    source: Path = Field(..., description="Compiled artifact loaded to run the test")
    label: str | None = Field(default=None, description="Display name override")

    @property
    def fully_qualified_name(self) -> str:
        """Return the ``namespace/name`` identity of the test."""
        return f"{self.namespace}/{self.name}"

    @property
    def display_name(self) -> str:
        return self.label or self.name

    @property
    def traits(self) -> Mapping[str, str]:
        """Traits attached to the test identity reported to the host."""
        return {"Namespace": self.namespace, "TestFile": str(self.source_file)}
