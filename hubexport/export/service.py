"""Export target resolution, overwrite confirmation and JSON persistence."""

import asyncio
import json
import logging
import os
import tempfile
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from pydantic_core import PydanticSerializationError

from .aggregator import ExportAggregator
from ..core.models import Hub, IndexEntry
from ..utils.error_handler import ExportWriteError

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]


class ExportOutcome(str, Enum):
    EXPORTED = "exported"
    NOTHING_EXPORTED = "nothing_exported"


def export_file_path(output_dir: str, hub: Hub) -> str:
    """Path of the index export for a hub: ``<dir>/indexes-<hubId>-<hubName>.json``."""
    directory = output_dir
    if directory.endswith(os.sep):
        directory = directory[:-1]
    file_name = os.path.basename(f"indexes-{hub.id}-{hub.name}")
    if file_name.endswith(".json"):
        file_name = file_name[: -len(".json")]
    return directory + os.sep + file_name + ".json"


def ask_yes_no(question: str) -> bool:
    """Interactive y/N prompt on the terminal."""
    answer = input(f"{question} (y/n) ").strip().lower()
    return answer in ("y", "yes")


class ExportGate:
    """Decides whether an export may be written to a path."""

    def __init__(self, confirm: Confirm = ask_yes_no, force: bool = False):
        self.confirm = confirm
        self.force = force

    def approve(self, path: str) -> bool:
        """True when nothing is at ``path`` yet, or the user agrees to overwrite it."""
        if not os.path.exists(path) or self.force:
            return True
        return self.confirm(f"Do you want to overwrite {path}?")


def _file_mode(target: Path) -> int:
    """Mode for the written file: the existing target's, else the umask default."""
    try:
        return target.stat().st_mode & 0o777
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


class ExportWriter:
    """Serializes export entries to a JSON file."""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def write(self, path: str, entries: Sequence[IndexEntry]) -> None:
        """Write ``entries`` as one JSON array, replacing whatever is at ``path``.

        The document is serialized completely before the file is touched, and
        lands through a rename, so a failure never leaves a partial file.

        Raises:
            ExportWriteError: If the document cannot be serialized or written
        """
        try:
            document = json.dumps(
                [entry.to_document() for entry in entries],
                indent=self.indent,
                ensure_ascii=False,
                allow_nan=False,
            )
        except (TypeError, ValueError, PydanticSerializationError) as e:
            raise ExportWriteError(path) from e

        target = Path(path)
        tmp_name: Optional[str] = None
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                os.fchmod(f.fileno(), _file_mode(target))
                f.write(document)
            os.replace(tmp_name, target)
            tmp_name = None
        except OSError as e:
            raise ExportWriteError(path) from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        logger.info(f"Wrote {len(entries)} index entries to {path}")


async def export_indexes(
    hub: Hub,
    output_dir: str,
    aggregator: ExportAggregator,
    gate: ExportGate,
    writer: Optional[ExportWriter] = None,
) -> ExportOutcome:
    """Aggregate the hub's indexes and write them next to ``output_dir``.

    Returns:
        ``EXPORTED`` when the file was written, ``NOTHING_EXPORTED`` when the
        overwrite was declined
    """
    entries: List[IndexEntry] = await aggregator.export()

    path = export_file_path(output_dir, hub)
    # The prompt blocks on the terminal, keep it off the event loop
    approved = await asyncio.get_running_loop().run_in_executor(None, gate.approve, path)
    if not approved:
        return ExportOutcome.NOTHING_EXPORTED

    (writer or ExportWriter()).write(path, entries)
    return ExportOutcome.EXPORTED
