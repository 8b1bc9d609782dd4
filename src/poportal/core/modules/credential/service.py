import base64
import binascii
import secrets

import bcrypt
import structlog

from poportal.core.core import Service
from poportal.core.modules.credential.models import BasicCredentials
from poportal.errors import UnauthorizedError

logger = structlog.get_logger(__name__)

BASIC_SCHEME = "basic"


def parse_basic_header(header: str | None) -> BasicCredentials:
    """Decode an `Authorization: Basic ...` header value.

    Raises UnauthorizedError for anything that is not a well-formed Basic header.
    """
    if not header:
        raise UnauthorizedError
    scheme, _, encoded = header.strip().partition(" ")
    if scheme.lower() != BASIC_SCHEME or not encoded.strip():
        raise UnauthorizedError
    try:
        decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise UnauthorizedError from e
    username, separator, password = decoded.partition(":")
    if not separator:
        raise UnauthorizedError
    return BasicCredentials(username=username, password=password)


class CredentialService(Service):
    """Checks credentials against the single configured principal."""

    def verify(self, credentials: BasicCredentials) -> bool:
        """Exact, case-sensitive comparison of both fields."""
        config = self.core.config
        # Evaluate both checks so timing does not reveal which field was wrong
        username_ok = secrets.compare_digest(credentials.username.encode("utf-8"), config.auth_username.encode("utf-8"))
        if config.auth_password_hash:
            password_ok = bcrypt.checkpw(credentials.password.encode("utf-8"), config.auth_password_hash.encode("utf-8"))
        elif config.auth_password:
            password_ok = secrets.compare_digest(credentials.password.encode("utf-8"), config.auth_password.encode("utf-8"))
        else:
            password_ok = False
        return username_ok and password_ok

    def authenticate_header(self, header: str | None) -> str:
        """Validate a Basic header and return the authenticated principal."""
        credentials = parse_basic_header(header)
        if not self.verify(credentials):
            logger.info("credentials_rejected")
            raise UnauthorizedError("Invalid credentials")
        return credentials.username

    async def on_start(self) -> None:
        logger.debug(
            "credential_service_started",
            principal=self.core.config.auth_username,
            hashed_password=bool(self.core.config.auth_password_hash),
        )
