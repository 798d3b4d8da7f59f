"""
Site building: tree walking, directory mirroring and asset copying.
"""

from .assets import AssetCopy, copy_assets, copy_document_assets, resolve_assets
from .paths import DocumentPaths
from .walker import BuildAborted, BuildReport, Diagnostic, SiteBuilder, build_site

__all__ = [
    "AssetCopy",
    "BuildAborted",
    "BuildReport",
    "Diagnostic",
    "DocumentPaths",
    "SiteBuilder",
    "build_site",
    "copy_assets",
    "copy_document_assets",
    "resolve_assets",
]
