"""Adapters for ExifTool, the filesystem, and the operator."""

from .base import AttributeWriter, InteractivePrompt, MetadataGateway, PreviewController
from .exiftool import ExifToolGateway
from .filesystem import (
    FileRenamer,
    QuarantineMover,
    SetFileAttributeWriter,
    UtimeAttributeWriter,
    build_attribute_writer,
)
from .interaction import ConsolePrompt, NullPreviewController, build_preview

__all__ = [
    "AttributeWriter",
    "InteractivePrompt",
    "MetadataGateway",
    "PreviewController",
    "ExifToolGateway",
    "FileRenamer",
    "QuarantineMover",
    "SetFileAttributeWriter",
    "UtimeAttributeWriter",
    "build_attribute_writer",
    "ConsolePrompt",
    "NullPreviewController",
    "build_preview",
]
