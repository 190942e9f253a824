# condo_core/iam/api/auth.py
"""
Cookie-based JWT session endpoints.

Tokens never appear in response bodies; login and refresh write them as
HttpOnly cookies named by SIMPLE_JWT["AUTH_COOKIE"] / ["AUTH_COOKIE_REFRESH"].
"""
from __future__ import annotations

import logging
from datetime import timedelta

from django.conf import settings
from django.contrib.auth import get_user_model
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer

from condo_core.iam.api.schema_serializers import DetailResponseSerializer, LoginRequestSerializer

logger = logging.getLogger(__name__)


class TokenCookies:
    """Reads SIMPLE_JWT cookie settings once per response."""

    def __init__(self):
        cfg = getattr(settings, "SIMPLE_JWT", {}) or {}
        self.access_name = cfg.get("AUTH_COOKIE", "condo_access")
        self.refresh_name = cfg.get("AUTH_COOKIE_REFRESH", "condo_refresh")
        self.access_max_age = self.lifetime(cfg.get("ACCESS_TOKEN_LIFETIME", timedelta(minutes=10)))
        self.refresh_max_age = self.lifetime(cfg.get("REFRESH_TOKEN_LIFETIME", timedelta(days=14)))
        self.options = {
            "httponly": True,
            "secure": bool(cfg.get("AUTH_COOKIE_SECURE", False)),
            "samesite": cfg.get("AUTH_COOKIE_SAMESITE", "Lax"),
            "path": "/",
        }

    @staticmethod
    def lifetime(value) -> int | None:
        if isinstance(value, timedelta):
            return int(value.total_seconds())
        # anything else: browser-session cookie
        return int(value) if isinstance(value, (int, float)) else None

    def write(self, response: Response, *, access: str, refresh: str) -> Response:
        response.set_cookie(self.access_name, access, max_age=self.access_max_age, **self.options)
        response.set_cookie(self.refresh_name, refresh, max_age=self.refresh_max_age, **self.options)
        return response

    def clear(self, response: Response) -> Response:
        for name in (self.access_name, self.refresh_name):
            response.delete_cookie(name, path="/")
        return response


def login_username(data) -> str | None:
    """Accounts sign in by email; a plain username still works for admin-created staff."""
    if data.get("username"):
        return data["username"]
    email = (data.get("email") or "").strip()
    if not email:
        return None
    user = get_user_model().objects.filter(email__iexact=email).only("username").first()
    return user.username if user else email


class LoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []

    @extend_schema(request=LoginRequestSerializer, responses={200: DetailResponseSerializer}, tags=["IAM"], operation_id="auth_login")
    def post(self, request):
        username = login_username(request.data)
        serializer = TokenObtainPairSerializer(data={"username": username, "password": request.data.get("password")})
        serializer.is_valid(raise_exception=True)

        logger.info("Login ok for %s", username)
        tokens = serializer.validated_data
        return TokenCookies().write(
            Response({"detail": "login ok"}, status=status.HTTP_200_OK),
            access=tokens["access"],
            refresh=tokens["refresh"],
        )


class RefreshView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []

    @extend_schema(request=None, responses={200: DetailResponseSerializer}, tags=["IAM"], operation_id="auth_refresh")
    def post(self, request):
        cookies = TokenCookies()
        refresh = request.COOKIES.get(cookies.refresh_name) or request.data.get("refresh")
        if not refresh:
            raise AuthenticationFailed("No refresh token.")

        serializer = TokenRefreshSerializer(data={"refresh": refresh})
        serializer.is_valid(raise_exception=True)
        tokens = serializer.validated_data
        return cookies.write(
            Response({"detail": "refreshed"}, status=status.HTTP_200_OK),
            access=tokens["access"],
            refresh=tokens.get("refresh", refresh),
        )


class LogoutView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=None, responses={200: DetailResponseSerializer}, tags=["IAM"], operation_id="auth_logout")
    def post(self, request):
        return TokenCookies().clear(Response({"detail": "logged out"}, status=status.HTTP_200_OK))
