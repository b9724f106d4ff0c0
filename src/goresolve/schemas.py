from pydantic import BaseModel, Field
from typing import List, Optional


class BuildPackage(BaseModel):
    """
    Raw build metadata of one Go package directory, as read by the loader.
    """
    import_path: str
    dir: str
    name: str
    root: str = ""  # Source root the package was found under
    goroot: bool = False  # True for standard library packages
    go_files: List[str] = Field(default_factory=list)
    cgo_files: List[str] = Field(default_factory=list)  # Files importing "C"
    ignored_go_files: List[str] = Field(default_factory=list)  # Excluded by build constraints
    test_go_files: List[str] = Field(default_factory=list)
    xtest_go_files: List[str] = Field(default_factory=list)  # package <name>_test
    imports: List[str] = Field(default_factory=list)
    test_imports: List[str] = Field(default_factory=list)
    xtest_imports: List[str] = Field(default_factory=list)

    @property
    def source_files(self) -> List[str]:
        """Go and cgo files that make up the package proper."""
        return self.go_files + self.cgo_files


class PackageSummary(BaseModel):
    """
    Compact, serializable view of a package for CLI output.
    """
    import_path: str
    name: str
    dir: str
    goroot: bool
    files: List[str] = Field(default_factory=list)
    imports: List[str] = Field(default_factory=list)


class ImportFailure(BaseModel):
    """
    An argument or directory that could not be imported.
    """
    target: str
    error: str
    error_type: str
    directory: Optional[str] = None
