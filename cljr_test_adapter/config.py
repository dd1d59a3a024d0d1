"""Configuration for the test adapter."""

from collections.abc import Sequence
from pathlib import Path

from pydantic import BaseModel, Field

DRIVER_FILE_NAME = "Clojure.MSBuild.Tool.dll"

DEFAULT_DRIVER_CANDIDATES: Sequence[str] = (
    f"{{project_dir}}/tools/net9.0/{DRIVER_FILE_NAME}",
    f"{{project_dir}}/../../tools/net9.0/{DRIVER_FILE_NAME}",
    f"{{project_dir}}/../../../../tools/net9.0/{DRIVER_FILE_NAME}",
    f"~/.nuget/packages/clojure.msbuild/*/tools/net9.0/{DRIVER_FILE_NAME}",
)


class AdapterConfig(BaseModel):
    """Configuration for discovery and execution."""

    launcher: str | None = Field(
        default="dotnet",
        description="Host executable used to start the driver (None runs it directly)",
    )
    driver_candidates: Sequence[str] = Field(
        default=DEFAULT_DRIVER_CANDIDATES,
        description="Ordered driver locations; may use {project_dir}, ~ and globs",
    )
    test_file_suffix: str = "_test.cljr"
    # Both relative to the directory holding the compiled artifact
    test_dir: str = "../../../test"
    project_dir: str = "../../.."
    failure_indicators: Sequence[str] = ("FAIL", "ERROR", "expected:")
    correlators: Sequence[str] = ("markers", "summary")

    def project_dir_for(self, source: Path) -> Path:
        """Return the project root owning a compiled artifact."""
        return (source.parent / self.project_dir).resolve()

    def test_dir_for(self, source: Path) -> Path:
        """Return the directory holding the test sources for an artifact."""
        return (source.parent / self.test_dir).resolve()
