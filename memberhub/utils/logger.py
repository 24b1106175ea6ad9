import logging
import os
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union


# ── column widths ─────────────────────────────────────────────────────────────
_W_SERIAL  = 6
_W_DATE    = 12
_W_TIME    = 10
_W_LEVEL   = 8
_W_ACTOR   = 10
_W_CONTACT = 28
_W_MODULE  = 30
_W_EVENT   = 40
_SEP       = " | "
_TOTAL_WIDTH = (
    _W_SERIAL + _W_DATE + _W_TIME + _W_LEVEL
    + _W_ACTOR + _W_CONTACT + _W_MODULE + _W_EVENT
    + len(_SEP) * 7
)


class StructuredFileHandler(logging.FileHandler):
    """File handler that writes fixed-width, human-readable columns.

    Column layout:
        Serial | Date | Time | Level | Actor | Contact | Module/Function | Event

    ``actor_id`` and ``actor_contact`` are read from ``extra={}`` on the
    logging call and shown as "-" when absent.
    """

    def __init__(self, log_file_path: str):
        super().__init__(log_file_path, mode="a", encoding="utf-8")
        self.log_counter = self._get_next_serial_number()
        self._ensure_header_exists()

    # ── helpers ───────────────────────────────────────────────────────────────

    def _get_next_serial_number(self) -> int:
        try:
            if os.path.exists(self.baseFilename) and os.path.getsize(self.baseFilename) > 0:
                with open(self.baseFilename, "r", encoding="utf-8") as f:
                    for line in reversed(f.readlines()):
                        parts = line.split(_SEP)
                        if parts and parts[0].strip().isdigit():
                            return int(parts[0].strip()) + 1
            return 1
        except OSError:
            return 1

    def _ensure_header_exists(self):
        if os.path.exists(self.baseFilename) and os.path.getsize(self.baseFilename) > 0:
            return
        with open(self.baseFilename, "w", encoding="utf-8") as f:
            f.write("=" * _TOTAL_WIDTH + "\n")
            f.write(f"{'MEMBERHUB WORKFLOW LOG':^{_TOTAL_WIDTH}}\n")
            f.write("=" * _TOTAL_WIDTH + "\n")
            header = (
                f"{'#':<{_W_SERIAL}}"
                f"{_SEP}{'Date':<{_W_DATE}}"
                f"{_SEP}{'Time':<{_W_TIME}}"
                f"{_SEP}{'Level':<{_W_LEVEL}}"
                f"{_SEP}{'Actor':<{_W_ACTOR}}"
                f"{_SEP}{'Contact':<{_W_CONTACT}}"
                f"{_SEP}{'Module/Function':<{_W_MODULE}}"
                f"{_SEP}{'Event':<{_W_EVENT}}"
            )
            f.write(header + "\n")
            f.write("-" * _TOTAL_WIDTH + "\n")

    # ── emit ──────────────────────────────────────────────────────────────────

    def emit(self, record: logging.LogRecord):
        try:
            dt = datetime.fromtimestamp(record.created)
            date_str = dt.strftime("%Y-%m-%d")
            time_str = dt.strftime("%H:%M:%S")

            module_func = f"{record.module}.{record.funcName}"

            actor   = str(getattr(record, "actor_id",      "-") or "-")
            contact = str(getattr(record, "actor_contact", "-") or "-")

            message_preview = record.getMessage()
            if len(message_preview) > _W_EVENT:
                message_preview = message_preview[:_W_EVENT - 3] + "..."

            line = (
                f"{self.log_counter:<{_W_SERIAL}}"
                f"{_SEP}{date_str:<{_W_DATE}}"
                f"{_SEP}{time_str:<{_W_TIME}}"
                f"{_SEP}{record.levelname:<{_W_LEVEL}}"
                f"{_SEP}{actor:<{_W_ACTOR}}"
                f"{_SEP}{contact:<{_W_CONTACT}}"
                f"{_SEP}{module_func:<{_W_MODULE}}"
                f"{_SEP}{message_preview:<{_W_EVENT}}"
            )

            with open(self.baseFilename, "a", encoding="utf-8") as f:
                f.write(line + "\n")

                # Full message on the next line for errors/warnings
                indent = " " * (_W_SERIAL + len(_SEP))
                full_msg = record.getMessage()
                if len(full_msg) > _W_EVENT:
                    f.write(f"{indent}Details: {full_msg}\n")

                if record.exc_info:
                    tb = "".join(traceback.format_exception(*record.exc_info))
                    f.write(f"{indent}Exception: {tb}\n")

                if record.levelname in ("ERROR", "CRITICAL"):
                    f.write("-" * _TOTAL_WIDTH + "\n")

            self.log_counter += 1
        except Exception:
            self.handleError(record)


# ── setup ─────────────────────────────────────────────────────────────────────

def setup_file_logging(log_level: Union[int, str] = logging.INFO, log_dir: Optional[Path] = None) -> logging.Logger:
    """Configure structured file + console logging.

    File handler records WARNING and above (to reduce noise).
    Console handler uses *log_level*.
    """
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())

    log_dir = log_dir or Path(__file__).parent.parent / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file_path = log_dir / "logs.txt"

    file_handler = StructuredFileHandler(str(log_file_path))
    file_handler.setLevel(logging.WARNING)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)

    file_handler.setFormatter(logging.Formatter("%(message)s"))
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    )

    logging.basicConfig(level=log_level, handlers=[file_handler, console_handler], force=True)

    logger = logging.getLogger(__name__)
    logger.warning("MemberHub SESSION STARTED at %s", datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC"))
    return logger


# ── helpers for callers ───────────────────────────────────────────────────────

def log_workflow_event(
    step: str,
    outcome: str,
    detail: str = "",
    actor_id: Optional[Union[int, str]] = None,
    actor_contact: Optional[str] = None,
    level: int = logging.INFO,
):
    """Log a registration / approval / login milestone with actor context.

    ``outcome`` is a short upper-case token (OK, REJECTED, FAILED, ...).
    Never pass codes or passwords in ``detail``.
    """
    _log = logging.getLogger("workflow")
    extra = {"actor_id": actor_id or "-", "actor_contact": actor_contact or "-"}
    if detail:
        _log.log(level, "%s %s: %s", step, outcome, detail, extra=extra)
    else:
        _log.log(level, "%s %s", step, outcome, extra=extra)
