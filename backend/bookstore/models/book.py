from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from bookstore.db import Base

BOOK_FIELDS = ("isbn", "amazon_url", "author", "language", "pages", "publisher", "title", "year")


class Book(Base):
    __tablename__ = "books"

    isbn: Mapped[str] = mapped_column(Text, primary_key=True)
    amazon_url: Mapped[str] = mapped_column(Text, nullable=False)
    author: Mapped[str] = mapped_column(Text, nullable=False)
    language: Mapped[str] = mapped_column(Text, nullable=False)
    pages: Mapped[int] = mapped_column(Integer, nullable=False)
    publisher: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)

    def to_dict(self) -> dict:
        return {name: getattr(self, name) for name in BOOK_FIELDS}
