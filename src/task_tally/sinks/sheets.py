# src/task_tally/sinks/sheets.py

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any

import gspread

from ..core.models import Destination, SyncResult

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Fixed cell layout per destination row; column B is left to the sheet owner.
TIMESTAMP_COLUMN = "A"
TOTAL_COLUMN = "C"
COMPLETED_COLUMN = "D"


def result_cells(result: SyncResult, destination: Destination) -> list[dict[str, Any]]:
    """Cell updates for one result, in gspread batch_update format."""
    return [
        {"range": destination.cell(TIMESTAMP_COLUMN), "values": [[result.timestamp.strftime(TIMESTAMP_FORMAT)]]},
        {"range": destination.cell(TOTAL_COLUMN), "values": [[result.total]]},
        {"range": destination.cell(COMPLETED_COLUMN), "values": [[result.completed]]},
    ]


class GspreadSheetSink:
    """
    Writes sync results into a Google Sheets spreadsheet via a service account.

    The spreadsheet is opened lazily on first write and reused; worksheets are
    looked up by name on every write so renamed tabs fail loudly.
    """

    def __init__(
        self,
        spreadsheet_key: str | None,
        *,
        credentials_path: str | Path = "credentials.json",
        client: Any | None = None,
    ) -> None:
        if not spreadsheet_key or not str(spreadsheet_key).strip():
            raise RuntimeError("Spreadsheet key is not set. Set TALLY_SPREADSHEET_KEY in your .env.")

        self._spreadsheet_key = str(spreadsheet_key).strip()
        self._credentials_path = Path(credentials_path)
        self._client = client
        self._spreadsheet: Any | None = None
        self._lock = threading.Lock()

    def _open(self) -> Any:
        with self._lock:
            if self._spreadsheet is not None:
                return self._spreadsheet

            if self._client is None:
                if not self._credentials_path.exists():
                    raise RuntimeError(
                        f"Google credentials not found: {self._credentials_path}. "
                        "Set TALLY_GOOGLE_CREDENTIALS_PATH in your .env."
                    )
                self._client = gspread.service_account(filename=str(self._credentials_path))

            self._spreadsheet = self._client.open_by_key(self._spreadsheet_key)
            logger.info("Opened spreadsheet %s", self._spreadsheet_key)
            return self._spreadsheet

    def write_result(self, result: SyncResult, destination: Destination) -> None:
        worksheet = self._open().worksheet(destination.sheet_name)
        worksheet.batch_update(result_cells(result, destination), value_input_option="USER_ENTERED")
        logger.debug(
            "Wrote %s!A/C/D%d = %s, %d, %d",
            destination.sheet_name,
            destination.row,
            result.timestamp.isoformat(),
            result.total,
            result.completed,
        )
