"""Adapters — bindings for the external tools the pipeline drives.

Public re-exports for convenient access.
"""

from get_cmake.adapters.base import ProgressCallback, SignatureTool, Transfer
from get_cmake.adapters.gpg import GpgSignatureTool
from get_cmake.adapters.http import HttpTransfer
from get_cmake.adapters.mock import MockSignatureTool, MockTransfer

__all__ = [
    "GpgSignatureTool",
    "HttpTransfer",
    "MockSignatureTool",
    "MockTransfer",
    "ProgressCallback",
    "SignatureTool",
    "Transfer",
]
