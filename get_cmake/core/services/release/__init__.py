"""
Release fetch service — resolve, fetch, verify, select, check, unpack.

Layers (each imports only from the ones above it):

    data           constants and URL templates
    domain         pure parsing and selection
    detection      host platform detection
    resolver       version and manifest resolution (network reads)
    execution      trust, integrity and unpack steps (side effects)
    orchestration  the linear pipeline
"""
