from bookstore.models.book import BOOK_FIELDS, Book

__all__ = ["BOOK_FIELDS", "Book"]
