# condo_core/iam/openapi.py
from drf_spectacular.extensions import OpenApiAuthenticationExtension
from drf_spectacular.plumbing import build_bearer_security_scheme_object

from condo_core.iam.auth import access_cookie_name


class CondoJWTScheme(OpenApiAuthenticationExtension):
    target_class = "condo_core.iam.auth.CookieOrHeaderJWTAuthentication"
    name = "condoJWT"

    def get_security_definition(self, auto_schema):
        scheme = build_bearer_security_scheme_object(
            header_name="AUTHORIZATION",
            token_prefix="Bearer",
            bearer_format="JWT",
        )
        scheme["description"] = (
            f"simplejwt access token. Browsers may send the `{access_cookie_name()}` "
            "cookie set by auth/login/ instead of the header."
        )
        return scheme
