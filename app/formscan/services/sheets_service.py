"""
Google Sheets mirror using gspread.

Appends one summary row per stored record to the first worksheet of the
configured spreadsheet. Columns are matched by header name.
"""

import logging

import gspread
from google.oauth2 import service_account

from .exceptions import SpreadsheetError

logger = logging.getLogger(__name__)

SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
TOKEN_URI = "https://oauth2.googleapis.com/token"


class SheetsMirror:
    """
    Spreadsheet client writing to ``spreadsheet.get_worksheet(0)``.

    The worksheet is opened on first use, so constructing the client never
    touches the network.
    """

    def __init__(self, client: gspread.Client, spreadsheet_id: str):
        self.client = client
        self.spreadsheet_id = spreadsheet_id
        self._worksheet: gspread.Worksheet | None = None

    @classmethod
    def from_service_account(
        cls,
        client_email: str,
        private_key: str,
        spreadsheet_id: str,
        timeout: float = 30.0,
    ) -> "SheetsMirror":
        credentials = service_account.Credentials.from_service_account_info(
            {
                "client_email": client_email,
                "private_key": private_key,
                "token_uri": TOKEN_URI,
            },
            scopes=SHEETS_SCOPES,
        )
        client = gspread.authorize(credentials)
        client.set_timeout(timeout)
        return cls(client, spreadsheet_id)

    @property
    def worksheet(self) -> gspread.Worksheet:
        if self._worksheet is None:
            spreadsheet = self.client.open_by_key(self.spreadsheet_id)
            self._worksheet = spreadsheet.get_worksheet(0)
            logger.info("Opened worksheet '%s' of spreadsheet %s", self._worksheet.title, self.spreadsheet_id)
        return self._worksheet

    def append_row(self, fields: dict[str, str]) -> None:
        """
        Append ``fields`` under the matching header columns.

        An empty worksheet gets a header row made of the field names first.
        The header check and write are not atomic: two first uploads racing on
        an empty worksheet can both write a header row.

        Raises:
            SpreadsheetError: If the spreadsheet cannot be opened or written.
        """
        try:
            worksheet = self.worksheet
            headers = worksheet.row_values(1)
            if not headers:
                headers = list(fields)
                worksheet.append_row(headers, value_input_option="RAW")
                logger.info("Wrote header row to empty worksheet: %s", headers)

            unknown = [name for name in fields if name not in headers]
            if unknown:
                logger.warning("Worksheet has no column for: %s", ", ".join(unknown))

            row = [fields.get(header, "") for header in headers]
            worksheet.append_row(row, value_input_option="RAW")
        except Exception as e:
            logger.exception("Spreadsheet append failed")
            raise SpreadsheetError(f"Spreadsheet error: {e}") from e

        logger.info("Spreadsheet row appended for %s", fields.get("UID"))
