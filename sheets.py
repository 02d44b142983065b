import logging
from typing import Callable, Dict, List, Optional

import gspread
from google.oauth2.service_account import Credentials

from config import GoogleCredentials

logger = logging.getLogger(__name__)

# -------------------------------------------------------------------
# CONFIGURATION
# -------------------------------------------------------------------
SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets.readonly",
]
TOKEN_URI = "https://oauth2.googleapis.com/token"


# -------------------------------------------------------------------
# AUTHENTICATION
# -------------------------------------------------------------------
def authorize(creds: GoogleCredentials) -> gspread.Client:
    """Authorize a Google Sheets client with the service account key."""
    info = {
        "type": "service_account",
        "client_email": creds.client_email,
        "private_key": creds.private_key,
        "token_uri": TOKEN_URI,
    }
    sa_creds = Credentials.from_service_account_info(info, scopes=SCOPES)
    return gspread.authorize(sa_creds)


# -------------------------------------------------------------------
# HEADER HELPERS
# -------------------------------------------------------------------
def _header_index_map(header: List[str]) -> Dict[str, int]:
    # First column wins when a header is repeated
    idx_map = {}
    for i, h in enumerate(header):
        if h and h not in idx_map:
            idx_map[h] = i
    return idx_map


# -------------------------------------------------------------------
# DOCUMENT
# -------------------------------------------------------------------
class SheetRow:
    """One data row, readable by column header."""

    def __init__(self, index_map: Dict[str, int], values: List[str]):
        self._index_map = index_map
        self._values = values

    def get(self, column: str) -> Optional[str]:
        idx = self._index_map.get(column)
        if idx is None:
            return None
        if idx >= len(self._values):
            return ""
        return self._values[idx]

    def __repr__(self):
        return f"SheetRow({self._values!r})"


class TranslationSheet:
    def __init__(self, worksheet):
        self._ws = worksheet
        self.header_values: List[str] = []

    @property
    def title(self) -> str:
        return self._ws.title

    def load_header_row(self):
        self.header_values = [str(h).strip() for h in self._ws.row_values(1)]

    def get_rows(self) -> List[SheetRow]:
        # get_all_values keeps every cell as text; get_all_records would
        # turn "10" into 10.
        values = self._ws.get_all_values()
        if not values:
            return []
        if not self.header_values:
            self.header_values = [str(h).strip() for h in values[0]]
        index_map = _header_index_map(self.header_values)
        return [SheetRow(index_map, r) for r in values[1:]]


class TranslationDocument:
    """
    Read-only view of the translations spreadsheet.
    Each worksheet is a namespace; the first row holds "key" and language codes.
    """

    def __init__(
        self,
        creds: GoogleCredentials,
        client_factory: Callable[[GoogleCredentials], gspread.Client] = authorize,
    ):
        self.creds = creds
        self._client_factory = client_factory
        self._client: Optional[gspread.Client] = None
        self._sheets: Optional[Dict[str, TranslationSheet]] = None

    def _get_client(self) -> gspread.Client:
        # Unlocked: concurrent first calls may each authorize; the last one is kept
        if self._client is None:
            self._client = self._client_factory(self.creds)
        return self._client

    def load_metadata(self):
        """Open the spreadsheet and index its worksheets by title."""
        spreadsheet = self._get_client().open_by_key(self.creds.spreadsheet_id)
        # Rebound in one assignment; readers see the old or the new index, never a partial one
        self._sheets = {ws.title: TranslationSheet(ws) for ws in spreadsheet.worksheets()}
        logger.debug("Loaded spreadsheet metadata: %s", list(self._sheets))

    def sheet_by_title(self, title: str) -> Optional[TranslationSheet]:
        if self._sheets is None:
            raise RuntimeError("load_metadata() must be called before sheet_by_title()")
        return self._sheets.get(title)
