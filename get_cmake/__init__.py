"""get-cmake — download, verify and unpack official CMake releases."""

__version__ = "0.1.0"
