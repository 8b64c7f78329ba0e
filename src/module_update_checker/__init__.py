"""
Module Update Checker - PowerShell gallery module status reporter.

Compares the latest module versions published to a NuGet v2 gallery
(PSGallery by default) against the copies installed under PSModulePath, and
optionally updates outdated copies in place.
"""

__version__ = "1.0.0"


def __getattr__(name: str):
    """Lazy import for heavy dependencies."""
    if name == "ModuleReconciler":
        from module_update_checker.core.reconciler import ModuleReconciler

        return ModuleReconciler
    if name == "ReportRow":
        from module_update_checker.models.module import ReportRow

        return ReportRow
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["ModuleReconciler", "ReportRow", "__version__"]
