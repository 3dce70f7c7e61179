from http import HTTPStatus

from flask import request
from flask_restx import Namespace, Resource, fields

import library_api.p_models as pmd
from library_api.auth.policy import authenticated, librarian_required
from library_api.extensions import services

book_namespace = Namespace("Books", description="Book operations", path="/")

new_book_input = book_namespace.model(
    "NewBookInput",
    {
        "title": fields.String(required=True, description="Title"),
        "author": fields.String(required=True, description="Author"),
        "number": fields.String(required=True, description="Unique catalog number"),
        "genre": fields.String(required=True, description="Genre"),
    },
)

donate_book_input = book_namespace.inherit(
    "DonateBookInput",
    new_book_input,
    {
        "donated_by_id": fields.Integer(required=True, description="Donor user ID"),
    },
)


def dump_book(book):
    return pmd.BookSchema.model_validate(book).model_dump(mode="json")


@book_namespace.route("/books")
class Books(Resource):
    @authenticated
    def get(self):
        books = services().circulation.list_books()
        if not books:
            return {"message": "No books found", "books": []}, HTTPStatus.OK
        return {
            "message": "Books retrieved successfully",
            "books": [dump_book(book) for book in books],
        }, HTTPStatus.OK

    @book_namespace.expect(new_book_input)
    @librarian_required
    def post(self):
        data = pmd.parse_body(pmd.CreateBookRequest, request.get_json(silent=True))
        book = services().circulation.add_book(data.title, data.author, data.number, data.genre)
        return {"message": "Book created successfully", "book": dump_book(book)}, HTTPStatus.CREATED


@book_namespace.route("/books/donate")
class DonateBook(Resource):
    @book_namespace.expect(donate_book_input)
    @authenticated
    def post(self):
        data = pmd.parse_body(pmd.DonateBookRequest, request.get_json(silent=True))
        book = services().circulation.donate_book(
            data.title, data.author, data.number, data.genre, data.donated_by_id
        )
        return {"message": "Book donated successfully", "book": dump_book(book)}, HTTPStatus.CREATED
