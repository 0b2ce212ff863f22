"""
Google Sheets Storage Implementation

DESIGN DECISION: A spreadsheet backend for single-household deployments:
the owner can read their ledger straight from Sheets and no database
has to be run.

TRADEOFFS:
- Every read pulls the whole worksheet; filtering happens in Python
- Concurrent writers are not coordinated (last write wins)

Each record is one row; values are written RAW so amounts and dates come
back as the exact strings we wrote.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

import gspread
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from finance_tracker.config import GoogleSheetsSettings, get_settings
from finance_tracker.models.stats import DateRange
from finance_tracker.models.transaction import Transaction, TransactionType
from finance_tracker.models.user import User
from finance_tracker.services.storage.interface import (
    DuplicateError,
    RecordNotFoundError,
    StorageConnectionError,
    StorageError,
    TransactionStorageInterface,
    UserStorageInterface,
    newest_first,
)


# Column mappings for Users sheet
USER_COLUMNS = [
    "id",
    "name",
    "email",
    "password_hash",
    "created_at",
    "updated_at",
]

# Column mappings for Transactions sheet
TRANSACTION_COLUMNS = [
    "id",
    "user_id",
    "type",
    "amount",
    "category",
    "note",
    "date",
    "created_at",
    "updated_at",
]


def _safe_get(row: list, index: int, default: str = "") -> str:
    try:
        return row[index] if row[index] else default
    except IndexError:
        return default


class GoogleSheetsClient:
    """
    Owns the gspread session for one spreadsheet.

    Handles authentication and worksheet lookup. Only the initial
    connection is retried; request-path reads and writes are not.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Authorize with the service account, once per process.

        Later calls reuse the authorized gspread client.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise StorageConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise StorageConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Open SPREADSHEET_ID, caching the handle."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise StorageConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def _get_or_create_sheet(
        self,
        title: str,
        columns: list[str],
        rows: int,
    ) -> gspread.Worksheet:
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=rows,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet

    def get_users_sheet(self) -> gspread.Worksheet:
        """Get or create the Users worksheet."""
        return self._get_or_create_sheet(
            self._settings.users_sheet_name, USER_COLUMNS, rows=500
        )

    def get_transactions_sheet(self) -> gspread.Worksheet:
        """Get or create the Transactions worksheet."""
        return self._get_or_create_sheet(
            self._settings.transactions_sheet_name, TRANSACTION_COLUMNS, rows=5000
        )


class GoogleSheetsUserStorage(UserStorageInterface):
    """
    Google Sheets implementation of the credential store.

    Users are stored as rows in a worksheet with one user per row.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    async def connect(self) -> None:
        self._client.get_users_sheet()

    def _user_to_row(self, user: User) -> list:
        return [
            str(user.id),
            user.name,
            user.email,
            user.password_hash,
            user.created_at.isoformat(),
            user.updated_at.isoformat(),
        ]

    def _row_to_user(self, row: list) -> User:
        return User(
            id=UUID(_safe_get(row, 0)),
            name=_safe_get(row, 1),
            email=_safe_get(row, 2),
            password_hash=_safe_get(row, 3),
            created_at=datetime.fromisoformat(_safe_get(row, 4)),
            updated_at=datetime.fromisoformat(_safe_get(row, 5)),
        )

    def _find_row(self, all_rows: list[list], column: int, value: str) -> Optional[int]:
        """1-based sheet row index of the first match, skipping the header."""
        for idx, row in enumerate(all_rows[1:], start=2):
            if row and len(row) > column and row[column] == value:
                return idx
        return None

    async def create_user(self, user: User) -> User:
        try:
            sheet = self._client.get_users_sheet()
            all_rows = sheet.get_all_values()
            if self._find_row(all_rows, 2, user.email) is not None:
                raise DuplicateError(f"Email already registered: {user.email}")
            sheet.append_row(self._user_to_row(user), value_input_option="RAW")
            return user
        except DuplicateError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save user: {e}")

    async def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        return await self._get_by(0, str(user_id))

    async def get_user_by_email(self, email: str) -> Optional[User]:
        return await self._get_by(2, email)

    async def _get_by(self, column: int, value: str) -> Optional[User]:
        try:
            sheet = self._client.get_users_sheet()
            all_rows = sheet.get_all_values()
            idx = self._find_row(all_rows, column, value)
            if idx is None:
                return None
            return self._row_to_user(all_rows[idx - 1])
        except Exception as e:
            raise StorageError(f"Failed to get user: {e}")

    async def update_user(self, user: User) -> User:
        try:
            sheet = self._client.get_users_sheet()
            all_rows = sheet.get_all_values()

            idx = self._find_row(all_rows, 0, str(user.id))
            if idx is None:
                raise RecordNotFoundError(f"User not found: {user.id}")

            other = self._find_row(all_rows, 2, user.email)
            if other is not None and other != idx:
                raise DuplicateError(f"Email already registered: {user.email}")

            sheet.update(
                range_name=f"A{idx}",
                values=[self._user_to_row(user)],
                value_input_option="RAW",
            )
            return user
        except (RecordNotFoundError, DuplicateError):
            raise
        except Exception as e:
            raise StorageError(f"Failed to update user: {e}")

    async def delete_user(self, user_id: UUID) -> bool:
        try:
            sheet = self._client.get_users_sheet()
            all_rows = sheet.get_all_values()
            idx = self._find_row(all_rows, 0, str(user_id))
            if idx is None:
                return False
            sheet.delete_rows(idx)
            return True
        except Exception as e:
            raise StorageError(f"Failed to delete user: {e}")


class GoogleSheetsTransactionStorage(TransactionStorageInterface):
    """
    Google Sheets implementation of the transaction store.

    Transactions are stored as rows in a worksheet with one transaction per row.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    async def connect(self) -> None:
        self._client.get_transactions_sheet()

    def _transaction_to_row(self, transaction: Transaction) -> list:
        return [
            str(transaction.id),
            str(transaction.user_id),
            transaction.type.value,
            str(transaction.amount),
            transaction.category,
            transaction.note or "",
            transaction.date.isoformat(),
            transaction.created_at.isoformat(),
            transaction.updated_at.isoformat(),
        ]

    def _row_to_transaction(self, row: list) -> Transaction:
        return Transaction(
            id=UUID(_safe_get(row, 0)),
            user_id=UUID(_safe_get(row, 1)),
            type=TransactionType(_safe_get(row, 2)),
            amount=Decimal(_safe_get(row, 3)),
            category=_safe_get(row, 4),
            note=_safe_get(row, 5) or None,
            date=datetime.fromisoformat(_safe_get(row, 6)),
            created_at=datetime.fromisoformat(_safe_get(row, 7)),
            updated_at=datetime.fromisoformat(_safe_get(row, 8)),
        )

    def _find_row(self, all_rows: list[list], transaction_id: UUID) -> Optional[int]:
        for idx, row in enumerate(all_rows[1:], start=2):
            if row and row[0] == str(transaction_id):
                return idx
        return None

    async def save_transaction(self, transaction: Transaction) -> Transaction:
        try:
            sheet = self._client.get_transactions_sheet()
            sheet.append_row(
                self._transaction_to_row(transaction),
                value_input_option="RAW",
            )
            return transaction
        except Exception as e:
            raise StorageError(f"Failed to save transaction: {e}")

    async def get_transaction_by_id(
        self,
        transaction_id: UUID,
    ) -> Optional[Transaction]:
        try:
            sheet = self._client.get_transactions_sheet()
            all_rows = sheet.get_all_values()
            idx = self._find_row(all_rows, transaction_id)
            if idx is None:
                return None
            return self._row_to_transaction(all_rows[idx - 1])
        except Exception as e:
            raise StorageError(f"Failed to get transaction: {e}")

    async def update_transaction(self, transaction: Transaction) -> Transaction:
        try:
            sheet = self._client.get_transactions_sheet()
            all_rows = sheet.get_all_values()
            idx = self._find_row(all_rows, transaction.id)
            if idx is None:
                raise RecordNotFoundError(f"Transaction not found: {transaction.id}")
            sheet.update(
                range_name=f"A{idx}",
                values=[self._transaction_to_row(transaction)],
                value_input_option="RAW",
            )
            return transaction
        except RecordNotFoundError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to update transaction: {e}")

    async def delete_transaction(self, transaction_id: UUID) -> bool:
        try:
            sheet = self._client.get_transactions_sheet()
            all_rows = sheet.get_all_values()
            idx = self._find_row(all_rows, transaction_id)
            if idx is None:
                return False
            sheet.delete_rows(idx)
            return True
        except Exception as e:
            raise StorageError(f"Failed to delete transaction: {e}")

    async def list_transactions(
        self,
        user_id: UUID,
        date_range: Optional[DateRange] = None,
    ) -> list[Transaction]:
        try:
            sheet = self._client.get_transactions_sheet()
            all_rows = sheet.get_all_values()[1:]  # Skip header

            transactions = []
            for row in all_rows:
                if not row or not row[0] or _safe_get(row, 1) != str(user_id):
                    continue
                transaction = self._row_to_transaction(row)
                if date_range is None or date_range.contains(transaction.date):
                    transactions.append(transaction)

            return newest_first(transactions)
        except Exception as e:
            raise StorageError(f"Failed to list transactions: {e}")

    async def delete_transactions_for_user(self, user_id: UUID) -> int:
        try:
            sheet = self._client.get_transactions_sheet()
            all_rows = sheet.get_all_values()
            doomed = [
                idx
                for idx, row in enumerate(all_rows[1:], start=2)
                if row and _safe_get(row, 1) == str(user_id)
            ]
            # Bottom-up so earlier indices stay valid
            for idx in reversed(doomed):
                sheet.delete_rows(idx)
            return len(doomed)
        except Exception as e:
            raise StorageError(f"Failed to delete transactions: {e}")
