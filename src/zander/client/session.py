"""Client-side product import session: upload -> preview -> importing -> complete.

The session owns all import state for one user flow. Nothing is cached
between sessions; ``reset()`` returns to a clean upload step.
"""
import enum
import logging
import threading
from typing import Callable, Dict, List, Optional

from apscheduler.schedulers.background import BackgroundScheduler

from src.zander.client.api_client import ImportApiError, ProductImportClient
from src.zander.config import get_settings
from src.zander.schemas.product_import import (
    DuplicateAction,
    ImportResult,
    ValidationResult,
    ValidationSummary,
)
from src.zander.services.csv_normalizer import decode_csv_content, parse_import_file

logger = logging.getLogger(__name__)

NO_VALID_DATA_MESSAGE = "No valid data found in file. Make sure it has a header row and at least one product."
PROGRESS_STEP = 10
PROGRESS_CAP = 90


class ImportStep(str, enum.Enum):
    UPLOAD = "upload"
    PREVIEW = "preview"
    IMPORTING = "importing"
    COMPLETE = "complete"


class InvalidTransitionError(Exception):
    pass


class ProgressTicker:
    """Drives the cosmetic progress indicator while a commit is in flight."""

    def __init__(self, tick: Callable[[], None], interval: float):
        self._tick = tick
        self._interval = interval
        self._scheduler: Optional[BackgroundScheduler] = None

    def start(self) -> None:
        self._scheduler = BackgroundScheduler()
        self._scheduler.add_job(
            self._tick,
            'interval',
            seconds=self._interval,
            id='import_progress',
            max_instances=1,
            replace_existing=True
        )
        self._scheduler.start()

    def stop(self) -> None:
        if self._scheduler:
            self._scheduler.shutdown(wait=True)
            self._scheduler = None


class ImportSession:
    def __init__(
        self,
        client: ProductImportClient,
        progress_interval: Optional[float] = None,
        on_progress: Optional[Callable[[int], None]] = None
    ):
        self.client = client
        if progress_interval is None:
            progress_interval = get_settings().PROGRESS_TICK_SECONDS
        self.progress_interval = progress_interval
        self.on_progress = on_progress
        self._lock = threading.Lock()

        self.step = ImportStep.UPLOAD
        self.file_name: Optional[str] = None
        self.parsed_rows: List[Dict[str, str]] = []
        self.validation: List[ValidationResult] = []
        self.summary: Optional[ValidationSummary] = None
        self.duplicate_action = DuplicateAction.SKIP
        self.result: Optional[ImportResult] = None
        self.error: Optional[str] = None
        self.progress = 0

    def _clear(self) -> None:
        self.file_name = None
        self.parsed_rows = []
        self.validation = []
        self.summary = None
        self.duplicate_action = DuplicateAction.SKIP
        self.result = None
        self.progress = 0

    def _move(self, step: ImportStep) -> None:
        logger.debug("Import session step %s -> %s", self.step.value, step.value)
        self.step = step

    def _set_progress(self, value: int) -> None:
        self.progress = value
        if self.on_progress:
            self.on_progress(value)

    @property
    def can_commit(self) -> bool:
        return (
            self.step == ImportStep.PREVIEW
            and self.summary is not None
            and self.summary.valid > 0
        )

    def load_bytes(self, content: bytes, file_name: Optional[str] = None) -> bool:
        try:
            text = decode_csv_content(content)
        except ValueError as e:
            self.error = str(e)
            return False
        return self.load_file(text, file_name)

    def load_file(self, text: str, file_name: Optional[str] = None) -> bool:
        """Parse a CSV file and fetch the server's validation preview.

        Returns True when the session reached the preview step.
        """
        if self.step != ImportStep.UPLOAD:
            raise InvalidTransitionError(f"Cannot load a file during the {self.step.value} step")

        self.error = None
        rows = parse_import_file(text)
        if not rows:
            self._clear()
            self.error = NO_VALID_DATA_MESSAGE
            return False

        self.file_name = file_name
        self.parsed_rows = rows
        try:
            response = self.client.validate(rows)
        except ImportApiError as e:
            logger.warning("Validation request failed: %s", e.message)
            self._clear()
            self.error = e.message
            self._move(ImportStep.UPLOAD)
            return False

        self.validation = response.data
        self.summary = response.summary
        logger.info(
            "Validated %d rows from %s: %d valid, %d invalid, %d duplicates",
            self.summary.total, file_name or "upload", self.summary.valid,
            self.summary.invalid, self.summary.duplicates
        )
        self._move(ImportStep.PREVIEW)
        return True

    def set_duplicate_action(self, action) -> None:
        try:
            self.duplicate_action = DuplicateAction(action)
        except ValueError:
            raise ValueError(f"duplicate action must be 'skip' or 'update', got {action!r}")

    def tick(self) -> None:
        with self._lock:
            if self.step != ImportStep.IMPORTING:
                return
            if self.progress < PROGRESS_CAP:
                self._set_progress(min(self.progress + PROGRESS_STEP, PROGRESS_CAP))

    def commit(self) -> Optional[ImportResult]:
        """Send the rows for import with the chosen duplicate policy."""
        if self.step != ImportStep.PREVIEW:
            raise InvalidTransitionError(f"Cannot import during the {self.step.value} step")
        if not self.can_commit:
            raise InvalidTransitionError("Nothing to import: no valid rows")

        self.error = None
        self._move(ImportStep.IMPORTING)
        self._set_progress(0)

        ticker = None
        if self.progress_interval and self.progress_interval > 0:
            ticker = ProgressTicker(self.tick, self.progress_interval)
            ticker.start()

        try:
            result = self.client.commit(self.parsed_rows, self.duplicate_action)
        except ImportApiError as e:
            logger.warning("Import request failed: %s", e.message)
            self._fail_commit(e.message)
            return None
        except Exception:
            logger.exception("Import request failed unexpectedly")
            self._fail_commit("Import failed unexpectedly. Please try again.")
            raise
        finally:
            if ticker:
                ticker.stop()

        with self._lock:
            self._set_progress(100)
            self.result = result
            self._move(ImportStep.COMPLETE)
        logger.info(
            "Import complete: %d imported, %d updated, %d skipped, %d errors",
            result.imported, result.updated, result.skipped, result.errors
        )
        return result

    def _fail_commit(self, message: str) -> None:
        with self._lock:
            self._set_progress(0)
            self.error = message
            self._move(ImportStep.PREVIEW)

    def reset(self) -> None:
        if self.step == ImportStep.IMPORTING:
            raise InvalidTransitionError("An import is in progress and cannot be cancelled")
        self._clear()
        self.error = None
        self._move(ImportStep.UPLOAD)

    def dismiss_error(self) -> None:
        self.error = None
