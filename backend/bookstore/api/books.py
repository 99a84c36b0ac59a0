from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from bookstore.db import get_db
from bookstore.services.books import BookRepository, ErrorKind, Result
from bookstore.services.validation import Mode, validate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/books", tags=["books"])

_STATUS = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.STORE: 500,
}


class _InvalidJSON:
    pass


INVALID_JSON = _InvalidJSON()


async def json_body(request: Request) -> Any:
    """Raw JSON body; INVALID_JSON when it does not parse, None when empty."""
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return INVALID_JSON


def get_repository(db: Session = Depends(get_db)) -> BookRepository:
    return BookRepository(db)


def error_body(message: str, status: int) -> dict:
    return {"error": {"message": message, "status": status}}


def respond(result: Result[Any], key: str | None, status: int = 200) -> JSONResponse:
    if result.ok:
        content = {key: result.value} if key else result.value
        return JSONResponse(content, status_code=status)

    code = _STATUS[result.error]
    if result.error is ErrorKind.VALIDATION:
        return JSONResponse({"errors": result.messages}, status_code=code)
    message = (result.messages or ["Internal Server Error"])[0]
    return JSONResponse(error_body(message, code), status_code=code)


def _validated(payload: Any, mode: Mode) -> Result[Any]:
    if payload is INVALID_JSON:
        return Result.failure(ErrorKind.VALIDATION, "body: malformed JSON")
    errors = validate(payload, mode)
    if errors:
        logger.debug("rejected %s payload: %s", mode.value, errors)
        return Result.failure(ErrorKind.VALIDATION, *errors)
    return Result.success(payload)


@router.get("")
def list_books(repo: BookRepository = Depends(get_repository)):
    return respond(repo.list_all(), "books")


@router.get("/{isbn}")
def get_book(isbn: str, repo: BookRepository = Depends(get_repository)):
    return respond(repo.get_by_isbn(isbn), "book")


@router.post("")
def create_book(payload: Any = Depends(json_body), repo: BookRepository = Depends(get_repository)):
    checked = _validated(payload, Mode.CREATE)
    if not checked.ok:
        return respond(checked, None)
    return respond(repo.create(checked.value), "book", status=201)


@router.put("/{isbn}")
def update_book(isbn: str, payload: Any = Depends(json_body), repo: BookRepository = Depends(get_repository)):
    checked = _validated(payload, Mode.UPDATE)
    if not checked.ok:
        return respond(checked, None)
    return respond(repo.update(isbn, checked.value), "book")


@router.delete("/{isbn}")
def delete_book(isbn: str, repo: BookRepository = Depends(get_repository)):
    return respond(repo.delete(isbn), None)
