# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 lhapdf-provision developers

"""
Static library build driver.

Compiles every source with the same flags (language standard, include
paths and the data-prefix define), archives the objects into
``lib<name>.a`` and installs the library and public headers under the
install prefix.
"""

import shlex
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from ..core.exceptions import (
    BuildError,
    CompilationError,
    SourceSetError,
    ToolchainNotFoundError,
    provision_error_handler,
    require,
)
from ..core.mixins import LoggingMixin
from .sources import BuildDefine, SourceFileSet


@dataclass(frozen=True)
class Toolchain:
    """Compiler, archiver and the flags shared by every translation unit."""

    cxx: str = "c++"
    ar: str = "ar"
    cxx_std: str = "c++11"
    optimize: str = "-O2"
    include_dirs: Tuple[Path, ...] = ()
    extra_flags: Tuple[str, ...] = ()
    build_dir: Path = Path("build")
    install_prefix: Optional[Path] = None
    library_name: str = "lhapdf-fortrajectum"
    link_libraries: Tuple[str, ...] = ()

    @classmethod
    def from_config(cls, config) -> 'Toolchain':
        """Build a toolchain from a ProvisionConfig, anchoring paths at the project root."""
        build = config.build
        build_dir = config.project_path(build.build_dir)
        prefix = config.project_path(build.install_prefix) if build.install_prefix else build_dir / "install"
        return cls(
            cxx=build.cxx,
            ar=build.ar,
            cxx_std=build.cxx_std,
            optimize=build.optimize,
            include_dirs=(config.project_path(build.include_dir),),
            extra_flags=tuple(build.extra_flags),
            build_dir=build_dir,
            install_prefix=prefix,
            library_name=build.library_name,
            link_libraries=tuple(build.link_libraries),
        )

    @property
    def library_filename(self) -> str:
        return f"lib{self.library_name}.a"

    @property
    def prefix(self) -> Path:
        return self.install_prefix or self.build_dir / "install"


@dataclass
class BuildResult:
    """What a build produced, or would produce in dry-run mode."""

    library: Path
    objects: List[Path] = field(default_factory=list)
    commands: List[List[str]] = field(default_factory=list)
    installed_library: Optional[Path] = None
    installed_headers: Optional[Path] = None
    link_libraries: Tuple[str, ...] = ()
    dry_run: bool = False


class StaticLibraryBuilder(LoggingMixin):
    """
    Drives the native toolchain for one static library.

    Args:
        toolchain: Compiler/archiver settings
        runner: subprocess.run compatible callable
        which: shutil.which compatible callable used to check executables
    """

    def __init__(
        self,
        toolchain: Toolchain,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
        which: Callable[[str], Optional[str]] = shutil.which,
    ):
        self.toolchain = toolchain
        self._runner = runner
        self._which = which

    # ------------------------------------------------------------------
    # Command construction
    # ------------------------------------------------------------------

    def compile_flags(self, define: BuildDefine) -> List[str]:
        tc = self.toolchain
        flags = [f"-std={tc.cxx_std}"]
        if tc.optimize:
            flags.append(tc.optimize)
        flags.extend(f"-I{d}" for d in tc.include_dirs)
        flags.extend(tc.extra_flags)
        flags.append(define.as_flag())
        return flags

    def object_path(self, source: Path, src_dir: Optional[Path] = None) -> Path:
        """Object file for ``source``, mirroring its location below ``src_dir``."""
        obj_dir = self.toolchain.build_dir / "obj"
        if src_dir is not None and source.is_relative_to(src_dir):
            return obj_dir / source.relative_to(src_dir).with_suffix(".o")
        return obj_dir / f"{source.stem}.o"

    def object_paths(self, sources: SourceFileSet) -> List[Path]:
        """
        Object files for every source, in source order.

        Raises:
            SourceSetError: Two sources would compile to the same object file
        """
        objects = {}
        for src in sources:
            obj = self.object_path(src, sources.src_dir)
            if obj in objects:
                raise SourceSetError(
                    f"Sources {objects[obj]} and {src} would both compile to {obj}"
                )
            objects[obj] = src
        return list(objects)

    def compile_command(self, source: Path, define: BuildDefine, src_dir: Optional[Path] = None) -> List[str]:
        return [
            *shlex.split(self.toolchain.cxx),
            *self.compile_flags(define),
            "-c", str(source),
            "-o", str(self.object_path(source, src_dir)),
        ]

    def archive_command(self, objects: Sequence[Path]) -> List[str]:
        library = self.toolchain.build_dir / self.toolchain.library_filename
        return [*shlex.split(self.toolchain.ar), "rcs", str(library), *map(str, objects)]

    def plan(self, sources: SourceFileSet, define: BuildDefine) -> List[List[str]]:
        """Every command the build will run, in order."""
        objects = self.object_paths(sources)
        commands = [self.compile_command(src, define, sources.src_dir) for src in sources]
        commands.append(self.archive_command(objects))
        return commands

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def _check_executable(self, command: str) -> None:
        executable = shlex.split(command)[0]
        if self._which(executable) is None:
            raise ToolchainNotFoundError(executable)

    def _run(self, command: List[str]) -> None:
        self.logger.debug(f"Running: {' '.join(command)}")
        try:
            self._runner(command, check=True, capture_output=True, text=True)
        except FileNotFoundError as e:
            raise ToolchainNotFoundError(command[0]) from e
        except subprocess.CalledProcessError as e:
            self.logger.error(f"Build failed: {e}")
            if e.stdout:
                self.logger.error("=== Build Output ===")
                for line in e.stdout.strip().split("\n"):
                    self.logger.error(f"  {line}")
            if e.stderr:
                self.logger.error("=== Error Output ===")
                for line in e.stderr.strip().split("\n"):
                    self.logger.error(f"  {line}")
            raise CompilationError(command, e.returncode, e.stdout, e.stderr) from e

    def build(self, sources: SourceFileSet, define: BuildDefine, dry_run: bool = False) -> BuildResult:
        """
        Compile and archive the static library.

        Raises:
            BuildError: Empty source set
            SourceSetError: Two sources share an object file name
            ToolchainNotFoundError: Compiler or archiver missing
            CompilationError: A command exited non-zero
        """
        require(len(sources) > 0, f"No sources to compile in {sources.src_dir}", BuildError)

        tc = self.toolchain
        library = tc.build_dir / tc.library_filename
        objects = self.object_paths(sources)
        commands = self.plan(sources, define)
        result = BuildResult(
            library=library,
            objects=objects,
            commands=commands,
            link_libraries=tc.link_libraries,
            dry_run=dry_run,
        )

        if dry_run:
            self.logger.info(f"[DRY RUN] Would run {len(commands)} commands to build {library}")
            for cmd in commands:
                self.logger.info(f"  {' '.join(cmd)}")
            return result

        self._check_executable(tc.cxx)
        self._check_executable(tc.ar)

        for obj_dir in sorted({obj.parent for obj in objects}):
            obj_dir.mkdir(parents=True, exist_ok=True)
        self.logger.info(f"Compiling {len(sources)} sources with {define}")
        for cmd in commands[:-1]:
            self._run(cmd)

        # ar appends to an existing archive; start clean so removed sources drop out.
        library.unlink(missing_ok=True)
        self._run(commands[-1])
        self.logger.info(f"Built {library}")
        return result

    def install(self, result: BuildResult, header_dirs: Optional[Sequence[Path]] = None) -> BuildResult:
        """Copy the library to ``<prefix>/lib`` and the public headers to ``<prefix>/include``."""
        prefix = self.toolchain.prefix
        header_dirs = list(self.toolchain.include_dirs if header_dirs is None else header_dirs)

        if result.dry_run:
            self.logger.info(f"[DRY RUN] Would install {result.library.name} and headers to {prefix}")
            return result

        with provision_error_handler("library install", self.logger, error_type=BuildError):
            lib_dir = prefix / "lib"
            lib_dir.mkdir(parents=True, exist_ok=True)
            installed = lib_dir / result.library.name
            shutil.copy2(result.library, installed)
            result.installed_library = installed

        include_dest = prefix / "include"
        with provision_error_handler("header install", self.logger, error_type=BuildError):
            for header_dir in header_dirs:
                if header_dir.is_dir():
                    shutil.copytree(header_dir, include_dest, dirs_exist_ok=True)
                else:
                    self.logger.warning(f"Header directory not found, skipping: {header_dir}")
            result.installed_headers = include_dest

        self.logger.info(f"Installed {result.library.name} and headers to {prefix}")
        if result.link_libraries:
            self.logger.info(f"Consumers must also link: {', '.join(result.link_libraries)}")
        return result
