from .account_repository import SqlAlchemyAccountRepository

__all__ = [
    "SqlAlchemyAccountRepository",
]
