from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from django.conf import settings


class CookieJWTAuthentication(JWTAuthentication):
    """
    JWT authentication that reads the access token from an HTTP-only cookie
    and falls back to the Authorization header
    """

    def authenticate(self, request):
        raw_token = request.COOKIES.get(settings.COOKIE_ACCESS_TOKEN_NAME)

        if not raw_token:
            header = self.get_header(request)
            if header is None:
                return None

            raw_token = self.get_raw_token(header)
            if raw_token is None:
                return None

        try:
            validated_token = self.get_validated_token(raw_token)
        except (InvalidToken, TokenError):
            # Let the header-based authenticator report the failure
            return None

        return self.get_user(validated_token), validated_token
