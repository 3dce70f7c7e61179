from http import HTTPStatus

from flask import request
from flask_restx import Namespace, Resource, fields

import library_api.p_models as pmd
from library_api.extensions import services
from library_api.models import Role

auth_namespace = Namespace("Auth", description="Authentication operations", path="/")


signup_input = auth_namespace.model(
    "SignUpInput",
    {
        "name": fields.String(required=True, description="Full name"),
        "email": fields.String(required=True, description="Email"),
        "password": fields.String(required=True, description="Password"),
        "role": fields.String(
            required=True, description="User Type", enum=[role.value for role in Role]
        ),
    },
)

signin_input = auth_namespace.model(
    "SignInInput",
    {
        "email": fields.String(required=True, description="Email"),
        "password": fields.String(required=True, description="Password"),
    },
)


@auth_namespace.route("/signup", methods=["POST"])
class SignUp(Resource):
    @auth_namespace.expect(signup_input)
    def post(self):
        data = pmd.parse_body(pmd.SignUpRequest, request.get_json(silent=True))
        user = services().accounts.sign_up(data.name, data.email, data.password, data.role)
        return {
            "message": "User registered successfully",
            "user": pmd.UserSummarySchema.model_validate(user).model_dump(mode="json"),
        }, HTTPStatus.CREATED


@auth_namespace.route("/signin", methods=["POST"])
class SignIn(Resource):
    @auth_namespace.expect(signin_input)
    def post(self):
        data = pmd.parse_body(pmd.SignInRequest, request.get_json(silent=True))
        user, token = services().accounts.sign_in(data.email, data.password)
        return {
            "message": "Login successful",
            "token": token,
            "user_id": user.id,
            "user_name": user.name,
            "user_email": user.email,
            "user_role": Role(user.role).value,
        }, HTTPStatus.OK
