from sqlmodel import Session, select

from .entity import Account
from .table import AccountTable


class AccountRepository:
    """Data-access layer for accounts."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, account: Account) -> Account:
        row = AccountTable.model_validate(account, from_attributes=True)
        self._session.add(row)
        self._session.flush()
        return Account.model_validate(row, from_attributes=True)

    def get(self, account_id: str) -> Account | None:
        row = self._session.get(AccountTable, account_id)
        if row is None:
            return None
        return Account.model_validate(row, from_attributes=True)

    def get_by_email(self, email: str) -> Account | None:
        statement = select(AccountTable).where(
            AccountTable.email == email.strip().lower()
        )
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return Account.model_validate(row, from_attributes=True)

    def update_password(self, account_id: str, password_hash: str) -> Account:
        row = self._session.get(AccountTable, account_id)
        if row is None:
            raise ValueError(f"Account {account_id} not found")
        row.password_hash = password_hash
        self._session.add(row)
        self._session.flush()
        return Account.model_validate(row, from_attributes=True)
