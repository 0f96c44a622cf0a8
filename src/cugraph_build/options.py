"""
Invocation Vocabulary

Closed set of build targets and flags accepted on the command line, and the
parsing of a raw token list into a validated :class:`Invocation`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import FrozenSet, List, Sequence

from .exceptions import InvalidOptionError

HELP_TOKENS = ("-h", "--help")


class Target(str, Enum):
    """Positional units of work."""

    CLEAN = "clean"
    UNINSTALL = "uninstall"
    LIBCUGRAPH = "libcugraph"
    LIBCUGRAPH_ETL = "libcugraph_etl"
    PYLIBCUGRAPH = "pylibcugraph"
    CUGRAPH = "cugraph"
    DOCS = "docs"
    ALL = "all"


class Flag(str, Enum):
    """Configuration toggles.

    Declaration order is the order overrides are applied in, so a later
    member wins when two flags touch the same field.
    """

    VERBOSE = "-v"
    DEBUG = "-g"
    NO_INSTALL = "-n"
    CLEAN_TARGET = "--clean"
    ALL_GPU_ARCH = "--allgpuarch"
    SKIP_CPP_TESTS = "--skip_cpp_tests"
    WITHOUT_CUGRAPHOPS = "--without_cugraphops"
    CPP_MTMG_TESTS = "cpp-mtmgtests"
    PYDEVELOP = "--pydevelop"


# Packages in the order they must be built.
BUILD_SEQUENCE = (
    Target.LIBCUGRAPH,
    Target.LIBCUGRAPH_ETL,
    Target.PYLIBCUGRAPH,
    Target.CUGRAPH,
)

_TARGETS = {t.value: t for t in Target}
_FLAGS = {f.value: f for f in Flag}


@dataclass(frozen=True)
class Invocation:
    """A validated command line: which targets run, which flags apply."""

    targets: FrozenSet[Target] = frozenset()
    flags: FrozenSet[Flag] = frozenset()

    def has(self, item: Target | Flag) -> bool:
        return item in self.targets or item in self.flags

    @property
    def is_default(self) -> bool:
        """True when no target was named, only (possibly zero) flags."""
        return not self.targets

    @property
    def wants_uninstall(self) -> bool:
        return self.has(Target.UNINSTALL) or self.has(Target.CLEAN)

    @property
    def wants_clean(self) -> bool:
        return self.has(Target.CLEAN)

    @property
    def wants_docs(self) -> bool:
        return self.has(Target.DOCS) or self.has(Target.ALL)

    def selected_builds(self) -> List[Target]:
        """Packages to build, always in :data:`BUILD_SEQUENCE` order."""
        if self.is_default or self.has(Target.ALL):
            return list(BUILD_SEQUENCE)
        return [t for t in BUILD_SEQUENCE if t in self.targets]


def wants_help(tokens: Sequence[str]) -> bool:
    return any(token in HELP_TOKENS for token in tokens)


def parse_invocation(tokens: Sequence[str]) -> Invocation:
    """Parse raw tokens, rejecting the first one outside the vocabulary."""
    targets = set()
    flags = set()
    for token in tokens:
        if token in _TARGETS:
            targets.add(_TARGETS[token])
        elif token in _FLAGS:
            flags.add(_FLAGS[token])
        else:
            raise InvalidOptionError(token)
    return Invocation(targets=frozenset(targets), flags=frozenset(flags))


def render_help(prog: str, libcugraph_build_dir: Path) -> str:
    return f"""{prog} [<target> ...] [<flag> ...]
 where <target> is:
   clean                      - remove all existing build artifacts and configuration (start over)
   uninstall                  - uninstall libcugraph and cugraph from a prior build/install (see also -n)
   libcugraph                 - build libcugraph.so and SG test binaries
   libcugraph_etl             - build libcugraph_etl.so and SG test binaries
   pylibcugraph               - build the pylibcugraph Python package
   cugraph                    - build the cugraph Python package
   docs                       - build the docs
   all                        - build everything
 and <flag> is:
   -v                         - verbose build mode
   -g                         - build for debug
   -n                         - do not install after a successful build (does not affect Python packages)
   --clean                    - clean an individual target (note: to do a complete rebuild, use the clean target described above)
   --allgpuarch               - build for all supported GPU architectures
   --skip_cpp_tests           - do not build the SG test binaries as part of the libcugraph and libcugraph_etl targets
   --without_cugraphops       - do not build algos that require cugraph-ops
   cpp-mtmgtests              - build libcugraph MTMG tests
   --pydevelop                - install the Python packages in editable mode
   -h | --help                - print this text

 default action (no args) is to build and install 'libcugraph' then 'libcugraph_etl' then 'pylibcugraph' and then 'cugraph' targets

 libcugraph build dir is: {libcugraph_build_dir}

 Set env var LIBCUGRAPH_BUILD_DIR to override libcugraph build dir.
"""
