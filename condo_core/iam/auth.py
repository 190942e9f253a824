# condo_core/iam/auth.py
from __future__ import annotations

from django.conf import settings
from rest_framework_simplejwt.authentication import JWTAuthentication

from condo_core.iam.scope import apply_scope_from_headers


def access_cookie_name() -> str:
    return settings.SIMPLE_JWT.get("AUTH_COOKIE", "condo_access")


class CookieOrHeaderJWTAuthentication(JWTAuthentication):
    """
    simplejwt access tokens from `Authorization: Bearer ...` or, when no
    header is sent, from the HttpOnly cookie written by auth/login/.

    Once the user is known the X-Tenant-Id scope is resolved and checked
    (the scope middleware runs before DRF and only sees anonymous users).
    """

    def raw_token(self, request):
        header = self.get_header(request)
        if header is not None:
            return self.get_raw_token(header)
        return request.COOKIES.get(access_cookie_name()) or None

    def authenticate(self, request):
        raw = self.raw_token(request)
        if raw is None:
            return None

        token = self.get_validated_token(raw)
        user = self.get_user(token)
        apply_scope_from_headers(request, user=user)
        return user, token
