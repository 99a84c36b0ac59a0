from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, List, Mapping, Optional, TypeVar

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bookstore.models.book import BOOK_FIELDS, Book

logger = logging.getLogger(__name__)

T = TypeVar("T")

# isbn is the key, never rewritten
UPDATABLE_FIELDS = tuple(f for f in BOOK_FIELDS if f != "isbn")


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    STORE = "store"


@dataclass
class Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[ErrorKind] = None
    messages: Optional[List[str]] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, *messages: str) -> "Result[T]":
        return cls(error=kind, messages=list(messages))


def _not_found(isbn: str) -> Result[Any]:
    return Result.failure(ErrorKind.NOT_FOUND, f"There is no book with an isbn '{isbn}'")


class BookRepository:
    """
    All queries against the books table.

    Operations return a Result instead of raising: NOT_FOUND when no row matches,
    STORE when the database refused the statement or could not be reached.
    update/delete check existence with a separate SELECT before mutating; the two
    statements are not wrapped in one transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def _store_failure(self, op: str) -> Result[Any]:
        logger.exception("books.%s failed", op)
        self.db.rollback()
        return Result.failure(ErrorKind.STORE, "Internal Server Error")

    def _exists(self, isbn: str) -> bool:
        return self.db.execute(select(Book.isbn).where(Book.isbn == isbn)).first() is not None

    def list_all(self) -> Result[List[Dict[str, Any]]]:
        try:
            rows = self.db.execute(select(Book)).scalars().all()
        except SQLAlchemyError:
            return self._store_failure("list_all")
        return Result.success([b.to_dict() for b in rows])

    def get_by_isbn(self, isbn: str) -> Result[Dict[str, Any]]:
        try:
            book = self.db.execute(select(Book).where(Book.isbn == isbn)).scalar_one_or_none()
        except SQLAlchemyError:
            return self._store_failure("get_by_isbn")
        if book is None:
            return _not_found(isbn)
        return Result.success(book.to_dict())

    def create(self, data: Mapping[str, Any]) -> Result[Dict[str, Any]]:
        book = Book(**{f: data[f] for f in BOOK_FIELDS})
        try:
            self.db.add(book)
            self.db.commit()
        except SQLAlchemyError:
            # duplicate isbn lands here as an IntegrityError
            return self._store_failure("create")
        logger.info("created book %s", book.isbn)
        return Result.success(book.to_dict())

    def update(self, isbn: str, fields: Mapping[str, Any]) -> Result[Dict[str, Any]]:
        values = {f: fields[f] for f in UPDATABLE_FIELDS}
        try:
            if not self._exists(isbn):
                return _not_found(isbn)
            self.db.execute(update(Book).where(Book.isbn == isbn).values(**values))
            self.db.commit()
            book = self.db.execute(
                select(Book).where(Book.isbn == isbn).execution_options(populate_existing=True)
            ).scalar_one_or_none()
        except SQLAlchemyError:
            return self._store_failure("update")
        if book is None:
            # deleted between our UPDATE and the re-read
            return _not_found(isbn)
        return Result.success(book.to_dict())

    def delete(self, isbn: str) -> Result[Dict[str, str]]:
        try:
            if not self._exists(isbn):
                return _not_found(isbn)
            self.db.execute(delete(Book).where(Book.isbn == isbn))
            self.db.commit()
        except SQLAlchemyError:
            return self._store_failure("delete")
        logger.info("deleted book %s", isbn)
        return Result.success({"message": "Book deleted"})
