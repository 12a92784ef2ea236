"""Writers that turn finished bins into downstream artifacts."""

from .bundle import VariableExport, export_project, export_variable
from .manifest import build_manifest, generate_manifest, load_manifest
from .report import generate_report
from .source import generate_source
from .tabular import bins_to_frame, to_csv

__all__ = [
    "VariableExport",
    "export_project",
    "export_variable",
    "build_manifest",
    "generate_manifest",
    "load_manifest",
    "generate_report",
    "generate_source",
    "bins_to_frame",
    "to_csv",
]
