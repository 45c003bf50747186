"""
Auth Service
Login and profile lookup against the school API. Tokens are issued and
verified remotely; nothing is stored here.
"""
import logging

from schooldesk.errors import ApiError
from schooldesk.models.user import LoginRequest, LoginResponse, User
from schooldesk.services.school_api import SchoolApiClient

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, api: SchoolApiClient):
        self.api = api

    def login(self, credentials: LoginRequest) -> LoginResponse:
        envelope = self.api.post(
            "/api/auth/login",
            {"phone_number": credentials.phone_number, "password": credentials.password},
        )
        data = envelope.data or {}
        if not data.get("token") or not data.get("user"):
            raise ApiError("Unexpected response format from API", endpoint="/api/auth/login")

        user = User(**data["user"])
        logger.info("User logged in: %s (%s)", user.id, user.role.value)
        return LoginResponse(token=data["token"], user=user)

    def profile(self, token: str) -> User:
        envelope = self.api.get("/api/users/profile", token=token)
        data = envelope.data or {}
        if not data.get("user"):
            raise ApiError("Unexpected response format from API", endpoint="/api/users/profile")
        return User(**data["user"])
