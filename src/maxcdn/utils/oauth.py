"""OAuth 1.0a request signing."""
from authlib.oauth1 import SIGNATURE_HMAC_SHA1, SIGNATURE_TYPE_HEADER, ClientAuth

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class OAuthSigner:
    def __init__(self, consumer_key: str, consumer_secret: str):
        """Two-legged signer, there is no access token."""
        self._auth = ClientAuth(
            consumer_key,
            consumer_secret,
            signature_method=SIGNATURE_HMAC_SHA1,
            signature_type=SIGNATURE_TYPE_HEADER,
        )

    def authorization_header(self, method: str, url: str, body: str = "") -> str:
        """
        Build the Authorization header for a request.
        Query parameters in the url are always signed, a form body only when given.
        """
        headers = {"Content-Type": FORM_CONTENT_TYPE} if body else {}
        _, signed_headers, _ = self._auth.sign(method.upper(), url, headers, body)
        return signed_headers["Authorization"]
