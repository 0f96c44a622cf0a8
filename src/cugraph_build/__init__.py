"""
cugraph-build: Build Orchestrator for the cuGraph Repository

Parses build targets and flags, derives an immutable build configuration and
drives CMake, pip and the documentation toolchain in a fixed order to build
and install libcugraph, libcugraph_etl, pylibcugraph and cugraph.
"""

__version__ = "1.0.0"
__author__ = "cuGraph Build Team"
__description__ = "Build Orchestrator for the cuGraph Repository"
