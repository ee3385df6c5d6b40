"""
Batch service.

Lints and reorders GDScript files on disk. Single files are processed
synchronously; batches fan out over worker threads, bounded by
``max_workers``, and a file that fails to read or parse is recorded as a
FileError without stopping the others.
"""

import asyncio
import time
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple, TypeVar, Union

from checkers.registry import RuleRegistry, create_default_registry
from gdstyle.analyzers.linter import Linter
from gdstyle.analyzers.reorder import ReorderEngine
from gdstyle.config import LinterConfig, settings
from gdstyle.models.error import FileError
from gdstyle.models.lint import FileLintResult, LintReport
from gdstyle.models.reorder import FileReorderResult, ReorderReport
from gdstyle.parser import GDScriptParser
from gdstyle.utils.logging import get_logger, log_error_with_context, log_file_result

logger = get_logger(__name__)

PathLike = Union[str, Path]
T = TypeVar("T")


class StyleService:
    """Lints and reorders GDScript files."""

    def __init__(
        self,
        config: Optional[LinterConfig] = None,
        registry: Optional[RuleRegistry] = None,
        max_workers: Optional[int] = None
    ):
        self.config = config or LinterConfig(
            disabled_rules=settings.disabled_rule_set,
            max_line_length=settings.max_line_length,
        )
        self.registry = registry or create_default_registry()
        self.max_workers = max(1, max_workers or settings.max_workers)
        self.parser = GDScriptParser()
        self.linter = Linter(self.config, self.registry)
        self.reorder_engine = ReorderEngine()

    def collect_files(self, paths: Iterable[PathLike]) -> List[Path]:
        """
        Expand paths into the list of files to process.

        Directories are walked recursively for ``*.gd`` files, skipping hidden
        directories such as ``.godot``. Files given explicitly are kept only if
        their extension is supported. Duplicates are dropped, order is kept.

        Args:
            paths: Files and directories

        Returns:
            Files to process
        """
        files: List[Path] = []
        seen = set()
        for raw in paths:
            path = Path(raw)
            if path.is_dir():
                candidates = sorted(
                    p for p in path.rglob("*.gd")
                    if p.is_file() and not any(part.startswith(".") for part in p.relative_to(path).parts)
                )
            elif self.registry.supports_file(str(path)):
                candidates = [path]
            else:
                logger.debug(f"Skipping unsupported file {path}")
                candidates = []

            for candidate in candidates:
                if candidate not in seen:
                    seen.add(candidate)
                    files.append(candidate)
        return files

    def lint_file(self, path: PathLike) -> FileLintResult:
        """
        Lint one file.

        Args:
            path: Path of a ``.gd`` file

        Returns:
            FileLintResult with sorted diagnostics

        Raises:
            OSError: If the file cannot be read
            UnicodeDecodeError: If the file is not UTF-8
            ParseError: If the parser fails
        """
        file_path = str(path)
        started = time.perf_counter()
        content = _read_source(Path(path))
        parsed = self.parser.parse(content, file_path)
        diagnostics = self.linter.lint(parsed)

        log_file_result(
            logger,
            file_path,
            "lint",
            diagnostics=len(diagnostics),
            duration_ms=(time.perf_counter() - started) * 1000,
        )
        return FileLintResult(file_path=file_path, diagnostics=diagnostics)

    def reorder_file(self, path: PathLike, write: bool = False) -> FileReorderResult:
        """
        Reorder one file.

        Args:
            path: Path of a ``.gd`` file
            write: Write the reordered text back when it changed

        Returns:
            FileReorderResult with the new text and whether it was written

        Raises:
            OSError: If the file cannot be read or written
            UnicodeDecodeError: If the file is not UTF-8
            ParseError: If the parser fails
        """
        file_path = str(path)
        started = time.perf_counter()
        content = _read_source(Path(path))
        result = self.reorder_engine.reorder(self.parser.parse(content, file_path))

        written = False
        if write and result.changed:
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(result.text)
            written = True
            logger.info(f"Reordered {file_path}", extra={"file_path": file_path, "phase": "reorder"})

        log_file_result(
            logger,
            file_path,
            "reorder",
            changed=result.changed,
            duration_ms=(time.perf_counter() - started) * 1000,
        )
        return FileReorderResult(file_path=file_path, result=result, written=written)

    async def lint_files(self, paths: Iterable[PathLike]) -> LintReport:
        """
        Lint every ``.gd`` file under the given paths concurrently.

        Args:
            paths: Files and directories

        Returns:
            LintReport with results in file order and the files that failed
        """
        files = self.collect_files(paths)
        results, errors = await self._run_all(files, self.lint_file, "lint")
        logger.info(
            f"Linted {len(results)} files, {sum(len(r.diagnostics) for r in results)} diagnostics, "
            f"{len(errors)} errors"
        )
        return LintReport(results=results, errors=errors)

    async def reorder_files(self, paths: Iterable[PathLike], write: bool = False) -> ReorderReport:
        """
        Reorder every ``.gd`` file under the given paths concurrently.

        Args:
            paths: Files and directories
            write: Write changed files back to disk

        Returns:
            ReorderReport with results in file order and the files that failed
        """
        files = self.collect_files(paths)
        results, errors = await self._run_all(files, lambda p: self.reorder_file(p, write=write), "reorder")
        changed = sum(1 for r in results if r.result.changed)
        logger.info(f"Reordered {len(results)} files, {changed} changed, {len(errors)} errors")
        return ReorderReport(results=results, errors=errors)

    async def _run_all(
        self,
        files: List[Path],
        func: Callable[[Path], T],
        phase: str
    ) -> Tuple[List[T], List[FileError]]:
        semaphore = asyncio.Semaphore(self.max_workers)

        async def run_one(path: Path) -> T:
            async with semaphore:
                return await asyncio.to_thread(func, path)

        tasks = [run_one(path) for path in files]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        results: List[T] = []
        errors: List[FileError] = []
        for path, outcome in zip(files, outcomes):
            if isinstance(outcome, Exception):
                log_error_with_context(
                    logger,
                    f"Failed to {phase} {path}: {outcome}",
                    outcome,
                    file_path=str(path),
                    phase=phase,
                )
                errors.append(FileError(
                    file_path=str(path),
                    phase=phase,
                    error_type=type(outcome).__name__,
                    message=str(outcome),
                ))
            else:
                results.append(outcome)
        return results, errors


def _read_source(path: Path) -> str:
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()
