"""
CLI workflow orchestration for dupimg.

Provides the CLIOrchestrator class that coordinates the CLI workflow from
argument parsing through fingerprint sync, duplicate resolution, actions and
cache save.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, Optional

from ..cache import CacheRegistry, CacheRegistryError, FingerprintStore
from ..models import DuplicateMatch, FingerprintEntry
from ..scanner import DirectoryNotFoundError, find_duplicates, image_extensions
from ..scanner.dependencies import progress_bar
from ..similarity import SimilarityComparer, clamp_threshold
from ..utils.formatters import display_path, format_match, format_number, format_sync_stats
from ..utils.validators import validate_directory, validate_threshold
from .actions import ACTION_MOVE, ACTION_REPORT, handle_duplicates
from .arg_parser import create_parser
from .reporting import notice_errors, print_cache_list


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure logging for the CLI.

    Args:
        verbose: Enable verbose (DEBUG level) logging

    Returns:
        Configured logger instance
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    return logging.getLogger(__name__)


class CLIOrchestrator:
    """
    Orchestrates the CLI workflow.

    Manages the lifecycle from argument parsing through cache management or
    fingerprint sync, duplicate resolution, action execution and cache save.
    """

    def __init__(self, argv: Optional[list[str]] = None):
        """
        Args:
            argv: Argument list (default: sys.argv[1:])
        """
        self.argv = sys.argv[1:] if argv is None else list(argv)
        self.logger = logging.getLogger(__name__)
        self.parser = create_parser()
        self.args = None
        self.registry: Optional[CacheRegistry] = None
        self.store: Optional[FingerprintStore] = None
        self.source_root = ""
        self.duplicates: list[FingerprintEntry] = []

    def run(self) -> int:
        """
        Execute the CLI workflow.

        Returns:
            Exit code (0 for success, 1 for error)

        Workflow phases:
        1. Setup & argument parsing
        2. Cache registry loading
        3. Cache management commands (list / delete)
        4. Validation
        5. Fingerprint sync
        6. Error report
        7. Duplicate resolution & actions
        8. Cache save
        """
        # Phase 1: Setup
        self.args = self.parser.parse_args(self.argv)
        self.logger = setup_logging(self.args.verbose)

        if not self.argv:
            self.parser.print_help()
            return 0

        # Phase 2: Registry
        exit_code = self._registry_phase()
        if exit_code != 0:
            return exit_code

        # Phase 3: Cache commands
        if self.args.cache_list:
            print_cache_list(self.registry.list())
            return 0
        if self.args.cache_delete is not None:
            return self._cache_delete_phase()

        # Phase 4: Validation
        exit_code = self._validate_phase()
        if exit_code != 0:
            return exit_code

        # Phase 5: Sync
        exit_code = self._sync_phase()
        if exit_code != 0:
            return exit_code

        # Phase 6: Errors
        notice_errors(self.store.errors(), self.args.errors_file, self.logger)

        # Phase 7: Compare & act
        self._compare_phase()

        # Phase 8: Save
        return self._save_phase()

    def _registry_phase(self) -> int:
        """Phase 2: Load the cache registry. An unreadable registry is fatal."""
        try:
            self.registry = CacheRegistry.in_directory(self.args.cache_dir)
        except CacheRegistryError as e:
            self.logger.error(str(e))
            return 1
        return 0

    def _cache_delete_phase(self) -> int:
        """Phase 3b: Delete a folder's cache. A missing key is a no-op."""
        key = self.args.cache_delete
        if key not in self.registry:
            absolute = os.path.abspath(key)
            if absolute in self.registry:
                key = absolute

        try:
            deleted = self.registry.delete(key)
        except (OSError, UnicodeError) as e:
            self.logger.error(f"Cannot delete cache for {key}: {e}")
            return 1

        if deleted:
            print("Cache deleted.")
        else:
            self.logger.info(f"No cache registered for {key}")
        return 0

    def _validate_phase(self) -> int:
        """
        Phase 4: Validate the source folder and move destination.

        Returns:
            0 for success, 1 for validation error
        """
        if self.args.directory is None:
            self.logger.error("A source folder is required")
            return 1

        self.source_root = os.path.abspath(str(self.args.directory))
        is_valid, error = validate_directory(self.source_root)
        if not is_valid:
            self.logger.error(error)
            return 1

        if self.args.move is not None:
            is_valid, error = validate_directory(os.path.abspath(str(self.args.move)))
            if not is_valid:
                self.logger.error(error)
                return 1

        is_valid, error = validate_threshold(self.args.threshold)
        if not is_valid:
            self.logger.warning(f"{error}, using {clamp_threshold(self.args.threshold)}")
        return 0

    def _sync_phase(self) -> int:
        """
        Phase 5: Load the folder's cache and bring it up to date.

        Returns:
            0 for success, 1 if the cache cannot be registered or the folder disappeared
        """
        try:
            self.store, created = self.registry.get_or_create(self.source_root, pattern=self.args.pattern)
        except (OSError, UnicodeError) as e:
            self.logger.error(f"Cannot register cache for {self.source_root}: {e}")
            return 1
        if created:
            self.logger.debug(f"New cache file {self.store.path}")
        else:
            self.logger.debug(f"Loaded {format_number(len(self.store))} cached entries from {self.store.path}")

        print("Processing...")
        show_progress = not self.args.no_progress
        extensions = image_extensions() if self.args.images_only else None

        pbar: Optional[Any] = progress_bar(None, "Fingerprinting", "img") if show_progress else None

        def report_progress(entry: FingerprintEntry) -> None:
            if pbar is not None:
                pbar.update(1)
            else:
                print(display_path(entry.identity))

        callback = report_progress if show_progress else None

        try:
            stats = self.store.sync_folder(
                self.source_root,
                progress_callback=callback,
                max_workers=self.args.workers,
                extensions=extensions,
            )
        except DirectoryNotFoundError as e:
            self.logger.error(str(e))
            return 1
        finally:
            if pbar is not None:
                pbar.close()

        self.logger.info(format_sync_stats(stats))
        return 0

    def _compare_phase(self) -> None:
        """Phase 7: Resolve duplicates and apply the report or move action."""
        print("Comparing...")
        comparer = SimilarityComparer(self.args.threshold)
        show_progress = not self.args.no_progress

        def log_match(match: DuplicateMatch) -> None:
            self.logger.debug(format_match(match))

        self.duplicates = find_duplicates(
            self.store.current_entries(),
            comparer,
            show_progress=show_progress,
            match_callback=log_match,
        )
        if not self.duplicates:
            self.logger.info("No similar images found")
            return

        if self.args.move is not None:
            stats = handle_duplicates(
                self.duplicates,
                action=ACTION_MOVE,
                source_root=self.source_root,
                move_root=self.args.move,
                logger=self.logger,
            )
        else:
            stats = handle_duplicates(self.duplicates, action=ACTION_REPORT, logger=self.logger)

        self.logger.info(f"Similar images: {format_number(stats['processed'] + stats['errors'])}")
        if stats['errors']:
            self.logger.warning(f"Failed to move {format_number(stats['errors'])} file(s)")

    def _save_phase(self) -> int:
        """Phase 8: Persist the pruned cache."""
        try:
            written = self.store.save()
        except (OSError, UnicodeError) as e:
            self.logger.error(f"Cannot save cache {self.store.path}: {e}")
            return 1
        self.logger.debug(f"Cached {format_number(written)} fingerprints")
        return 0


__all__ = ['CLIOrchestrator', 'setup_logging']
