import pytest

from bookstore.services.validation import Mode, required_fields


def _without_isbn(book):
    return {k: v for k, v in book.items() if k != "isbn"}


def test_list_books(seeded, book):
    response = seeded.get("/books")
    assert response.status_code == 200
    books = response.json()["books"]
    assert len(books) == 1
    assert books[0]["isbn"] == book["isbn"]


def test_list_books_empty(client):
    response = client.get("/books")
    assert response.status_code == 200
    assert response.json() == {"books": []}


def test_get_book(seeded, book):
    response = seeded.get(f"/books/{book['isbn']}")
    assert response.status_code == 200
    assert response.json()["book"] == book


def test_get_missing_book_is_404(seeded):
    response = seeded.get("/books/999")
    assert response.status_code == 404
    assert response.json()["error"]["status"] == 404
    assert "999" in response.json()["error"]["message"]


def test_create_book(client):
    new_book = {
        "isbn": "1234567890",
        "amazon_url": "http://a.co/eobPtX3",
        "author": "John Doe",
        "language": "english",
        "pages": 300,
        "publisher": "Example Publisher",
        "title": "Example Book",
        "year": 2020,
    }
    response = client.post("/books", json=new_book)
    assert response.status_code == 201
    assert response.json()["book"] == new_book
    assert client.get("/books/1234567890").json()["book"] == new_book


def test_create_with_empty_body_is_400(client):
    response = client.post("/books", json={})
    assert response.status_code == 400
    errors = response.json()["errors"]
    assert len(errors) == len(required_fields(Mode.CREATE))


@pytest.mark.parametrize("field", required_fields(Mode.CREATE))
def test_create_missing_field_writes_nothing(client, book, field):
    del book[field]
    response = client.post("/books", json=book)
    assert response.status_code == 400
    assert any(e.startswith(f"{field}:") for e in response.json()["errors"])
    assert client.get("/books").json()["books"] == []


@pytest.mark.parametrize("field, value", [("pages", "264"), ("year", 2017.5), ("pages", True), ("pages", -1)])
def test_create_wrong_typed_numbers_is_400(client, book, field, value):
    book[field] = value
    response = client.post("/books", json=book)
    assert response.status_code == 400
    assert client.get("/books").json()["books"] == []


def test_create_with_malformed_json_is_400(client):
    response = client.post("/books", content=b"{not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert response.json()["errors"] == ["body: malformed JSON"]


def test_create_duplicate_isbn_is_500_without_detail(seeded, book):
    response = seeded.post("/books", json=book)
    assert response.status_code == 500
    assert response.json() == {"error": {"message": "Internal Server Error", "status": 500}}
    assert len(seeded.get("/books").json()["books"]) == 1


def test_update_book(seeded, book):
    changes = {
        "amazon_url": "http://a.co/eobPtX4",
        "author": "Jane Doe",
        "language": "spanish",
        "pages": 350,
        "publisher": "Updated Publisher",
        "title": "Updated Book",
        "year": 2021,
    }
    response = seeded.put(f"/books/{book['isbn']}", json=changes)
    assert response.status_code == 200
    updated = response.json()["book"]
    assert updated["isbn"] == book["isbn"]
    assert updated["author"] == "Jane Doe"

    stored = seeded.get(f"/books/{book['isbn']}").json()["book"]
    assert stored == {"isbn": book["isbn"], **changes}


def test_update_ignores_isbn_in_body(seeded, book):
    changes = _without_isbn(book)
    changes["isbn"] = "0000000000"
    changes["language"] = "spanish"
    response = seeded.put(f"/books/{book['isbn']}", json=changes)
    assert response.status_code == 200
    assert response.json()["book"]["isbn"] == book["isbn"]
    assert seeded.get("/books/0000000000").status_code == 404


def test_update_missing_book_is_404(seeded, book):
    response = seeded.put("/books/999", json=_without_isbn(book))
    assert response.status_code == 404


def test_update_with_invalid_data_is_400(seeded, book):
    changes = _without_isbn(book)
    del changes["amazon_url"]
    changes["author"] = "Jane Doe"
    response = seeded.put(f"/books/{book['isbn']}", json=changes)
    assert response.status_code == 400
    assert seeded.get(f"/books/{book['isbn']}").json()["book"]["author"] == book["author"]


def test_delete_book(seeded, book):
    response = seeded.delete(f"/books/{book['isbn']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Book deleted"}
    assert seeded.get(f"/books/{book['isbn']}").status_code == 404


def test_delete_twice_is_404(seeded, book):
    assert seeded.delete(f"/books/{book['isbn']}").status_code == 200
    assert seeded.delete(f"/books/{book['isbn']}").status_code == 404
