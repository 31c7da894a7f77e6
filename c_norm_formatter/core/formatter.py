"""
Auto Formatter Module

This module applies the format pipeline to files on disk. It handles
reading and writing with the file's own line endings, timestamped backups,
restore, previews and batches of files.
"""

import os
import shutil
import datetime
from typing import Callable, Dict, Iterable, List, Optional
from pathlib import Path
import logging

from .checker import Diagnostic
from .config import NormConfig
from .pipeline import FormatPipeline

logger = logging.getLogger(__name__)


class FormatResult:
    """Result of formatting one file."""

    def __init__(self, success: bool, message: str, changes_made: int = 0,
                 original_content: str = "", formatted_content: str = "",
                 diagnostics: List[Diagnostic] = None):
        self.success = success
        self.message = message
        self.changes_made = changes_made
        self.original_content = original_content
        self.formatted_content = formatted_content
        self.diagnostics = diagnostics or []

    def __repr__(self):
        return f"FormatResult(success={self.success}, changes={self.changes_made}, message='{self.message}')"


class AutoFormatter:
    """
    File formatter for the 42 norm.

    This class provides:
    - In-place formatting of C source files
    - Safe backup and restore functionality
    - Previews that never touch the file
    - Batch formatting with cooperative cancellation between files
    """

    def __init__(self, backup_enabled: bool = True, config: Optional[NormConfig] = None,
                 backup_dir: str = ".norm_backups"):
        """
        Initialize the auto formatter.

        Args:
            backup_enabled: Whether to create backups before formatting
            config: Norm limits used by the pipeline
            backup_dir: Directory holding backups
        """
        self.backup_enabled = backup_enabled
        self.backup_dir = backup_dir
        self.pipeline = FormatPipeline(config)

    def _create_backup(self, filepath: str) -> bool:
        """Create a backup of the file before formatting."""
        if not self.backup_enabled:
            return True

        try:
            backup_path = Path(self.backup_dir)
            backup_path.mkdir(parents=True, exist_ok=True)

            timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S_%f")
            backup_filepath = backup_path / f"{Path(filepath).name}.{timestamp}.backup"
            shutil.copy2(filepath, backup_filepath)

            logger.info(f"Created backup: {backup_filepath}")
            return True

        except OSError as e:
            logger.error(f"Failed to create backup for {filepath}: {e}")
            return False

    def _read_file(self, filepath: str) -> Optional[str]:
        """Read file content without translating line endings."""
        try:
            with open(filepath, 'r', encoding='utf-8', newline='') as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read file {filepath}: {e}")
            return None

    def _write_file(self, filepath: str, content: str) -> bool:
        try:
            with open(filepath, 'w', encoding='utf-8', newline='') as f:
                f.write(content)
            return True
        except OSError as e:
            logger.error(f"Failed to write file {filepath}: {e}")
            return False

    def format_file(self, filepath: str) -> FormatResult:
        """
        Format a file in place.

        Args:
            filepath: Path to the file to format

        Returns:
            FormatResult object
        """
        if not os.path.exists(filepath):
            return FormatResult(False, f"File not found: {filepath}")

        original_content = self._read_file(filepath)
        if original_content is None:
            return FormatResult(False, f"Failed to read file: {filepath}")

        result = self.pipeline.run(original_content)
        content = result.formatted_text

        if content == original_content:
            return FormatResult(True, "No changes needed", 0, original_content, content,
                                result.diagnostics)

        if not self._create_backup(filepath):
            return FormatResult(False, f"Failed to create backup for: {filepath}")

        if not self._write_file(filepath, content):
            return FormatResult(False, f"Failed to write formatted content to: {filepath}")

        return FormatResult(True, f"Successfully formatted file with {result.changes_made} changes",
                            result.changes_made, original_content, content, result.diagnostics)

    def format_multiple_files(self, filepaths: Iterable[str],
                              should_cancel: Optional[Callable[[], bool]] = None) -> Dict[str, FormatResult]:
        """
        Format multiple files.

        Args:
            filepaths: Files to format, in order
            should_cancel: Checked before each file; a true result stops the batch

        Returns:
            Dictionary mapping filepaths to their FormatResult objects
        """
        results = {}

        for filepath in filepaths:
            if should_cancel is not None and should_cancel():
                logger.info(f"Formatting cancelled after {len(results)} files")
                break

            logger.info(f"Formatting file: {filepath}")
            result = self.format_file(filepath)
            results[filepath] = result

            if result.success:
                logger.info(f"Formatted {filepath}: {result.message}")
            else:
                logger.error(f"Failed to format {filepath}: {result.message}")

        return results

    def get_format_preview(self, filepath: str) -> Optional[str]:
        """Return what the file would look like after formatting, or None."""
        original_content = self._read_file(filepath)
        if original_content is None:
            return None
        return self.pipeline.run(original_content).formatted_text

    def restore_from_backup(self, filepath: str) -> bool:
        """
        Restore a file from its most recent backup.

        Args:
            filepath: Path to the file to restore

        Returns:
            True if restoration was successful
        """
        backup_path = Path(self.backup_dir)
        if not backup_path.exists():
            logger.error("No backup directory found")
            return False

        filename = Path(filepath).name
        backup_files = list(backup_path.glob(f"{filename}.*.backup"))
        if not backup_files:
            logger.error(f"No backup found for {filepath}")
            return False

        most_recent = max(backup_files, key=lambda p: (p.stat().st_mtime, p.name))

        try:
            shutil.copy2(most_recent, filepath)
        except OSError as e:
            logger.error(f"Failed to restore {filepath} from backup: {e}")
            return False

        logger.info(f"Restored {filepath} from backup {most_recent}")
        return True
