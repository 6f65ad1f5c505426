"""JSON Web Token authentication plugin.

Signs and verifies HS256 tokens with ``PyJWT`` and exposes a pre-request
hook that rejects requests without a valid bearer token::

    app.register_plugin(JwtPlugin("supersecret"))
    jwt = app.get_plugin(JwtPlugin)

    app.post("/login", lambda: jwt.sign({"sub": "alice"}))
    app.get("/hello", hello, pre_hooks=[jwt.authentication_hook])

Verified claims are available to later hooks and the handler as
``request.metadata["jwt"]``.

``PyJWT`` is an optional dependency (``pip install gazelle[jwt]``).
If it is not installed, ``initialize`` raises ``ConfigurationError``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from gazelle.errors import ConfigurationError
from gazelle.hooks import Continue, PreRequestHook, ShortCircuit
from gazelle.http.request import Request
from gazelle.http.response import Response

if TYPE_CHECKING:
    from gazelle.context import GazelleContext

AUTH_HEADER_NAME = "Authorization"
BEARER_SCHEMA = "Bearer "
JWT_METADATA_KEY = "jwt"

MISSING_AUTH_HEADER_MESSAGE = "Missing authorization header"
BAD_BEARER_SCHEMA_MESSAGE = "Authorization header must use the Bearer schema"
INVALID_TOKEN_MESSAGE = "Invalid or expired token"


class JwtPlugin:
    """JWT signing, verification, and an authentication hook."""

    __slots__ = ("_algorithm", "_auth_hook", "_codec", "_secret")

    def __init__(self, secret: str, *, algorithm: str = "HS256") -> None:
        if not secret:
            msg = "JwtPlugin requires a non-empty secret."
            raise ConfigurationError(msg)
        self._secret = secret
        self._algorithm = algorithm
        self._codec: Any = None
        self._auth_hook: PreRequestHook | None = None

    def initialize(self, context: GazelleContext) -> None:
        try:
            from jwt import PyJWT
        except ImportError:
            msg = (
                "JwtPlugin requires the 'PyJWT' package. "
                "Install it with: pip install gazelle[jwt]"
            )
            raise ConfigurationError(msg) from None
        self._codec = PyJWT()
        self._auth_hook = self.get_authentication_hook()

    def sign(self, payload: dict[str, Any]) -> str:
        """Sign *payload* into a compact token."""
        return self._require_codec().encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> dict[str, Any] | None:
        """Verify *token* and return its claims, or ``None`` if it is invalid."""
        from jwt import InvalidTokenError

        try:
            return self._require_codec().decode(token, self._secret, algorithms=[self._algorithm])
        except InvalidTokenError:
            return None

    def get_authentication_hook(self, *, share_with_child_routes: bool = True) -> PreRequestHook:
        """Return a pre-request hook that requires a valid bearer token.

        Short-circuits with 401 and a plain-text reason when the header is
        missing, does not use the Bearer schema, or carries a bad token.
        """

        async def authenticate(request: Request, response: Response) -> Continue | ShortCircuit:
            auth_header = request.headers.get(AUTH_HEADER_NAME)
            if auth_header is None:
                return ShortCircuit(response.copy_with(status=401, body=MISSING_AUTH_HEADER_MESSAGE))

            if not auth_header.startswith(BEARER_SCHEMA):
                return ShortCircuit(response.copy_with(status=401, body=BAD_BEARER_SCHEMA_MESSAGE))

            claims = self.verify(auth_header.removeprefix(BEARER_SCHEMA).strip())
            if claims is None:
                return ShortCircuit(response.copy_with(status=401, body=INVALID_TOKEN_MESSAGE))

            return Continue(request.with_metadata(**{JWT_METADATA_KEY: claims}), response)

        return PreRequestHook(authenticate, share_with_child_routes=share_with_child_routes)

    @property
    def authentication_hook(self) -> PreRequestHook:
        """The shared authentication hook created at initialization."""
        if self._auth_hook is None:
            msg = "JwtPlugin used before initialize(); register it with app.register_plugin()."
            raise ConfigurationError(msg)
        return self._auth_hook

    def _require_codec(self) -> Any:
        if self._codec is None:
            msg = "JwtPlugin used before initialize(); register it with app.register_plugin()."
            raise ConfigurationError(msg)
        return self._codec
