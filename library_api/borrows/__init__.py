from http import HTTPStatus

from flask import request
from flask_restx import Namespace, Resource, fields

import library_api.p_models as pmd
from library_api.auth.policy import authenticated
from library_api.errors import ValidationError
from library_api.extensions import services

borrow_namespace = Namespace("Borrows", description="Borrow / Return operations", path="/")

borrow_book_input = borrow_namespace.model(
    "BorrowBookInput",
    {
        "book_id": fields.Integer(required=True, description="Book ID"),
        "user_id": fields.Integer(required=True, description="Borrower ID"),
    },
)


def parse_borrow_id(value):
    try:
        borrow_id = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Invalid borrow ID") from None
    if not 0 < borrow_id <= pmd.MAX_ID:
        raise ValidationError("Invalid borrow ID")
    return borrow_id


@borrow_namespace.route("/books/borrow")
class BorrowBook(Resource):
    @borrow_namespace.expect(borrow_book_input)
    @authenticated
    def post(self):
        data = pmd.parse_body(pmd.BorrowBookRequest, request.get_json(silent=True))
        receipt = services().circulation.borrow_book(data.book_id, data.user_id)
        return {
            "message": "Book borrowed successfully",
            "borrow_id": receipt.borrow_id,
            "book_id": receipt.book_id,
            "user_id": receipt.user_id,
            "due_date": receipt.due_date.isoformat(),
        }, HTTPStatus.CREATED


@borrow_namespace.route("/books/return/<string:borrow_id>")
@borrow_namespace.doc(params={"borrow_id": "Borrow ID"})
class ReturnBook(Resource):
    @authenticated
    def post(self, borrow_id):
        receipt = services().circulation.return_book(parse_borrow_id(borrow_id))
        return {
            "message": "Book returned successfully",
            "borrow_id": receipt.borrow_id,
            "book_id": receipt.book_id,
            "user_id": receipt.user_id,
            "fine_incurred": receipt.fine_incurred,
            "is_overdue": receipt.is_overdue,
        }, HTTPStatus.OK
