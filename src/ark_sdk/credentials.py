"""
Credentials and the authenticators that produce them.

A credential is an opaque bearer token plus free-form metadata. Metadata
may carry a ``cookies`` blob (base64 of a JSON object) and an ``env``
hint. Credentials are immutable; a refresh produces a new one.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from .masking import mask_sensitive

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_TYPE = "Bearer"
DEFAULT_AUTH_HEADER_NAME = "Authorization"


@dataclass(frozen=True)
class ArkCredential:
    """
    Bearer credential issued by an external authentication flow.

    Attributes:
        token: Raw token value (usually a JWT)
        token_type: Scheme placed before the token in the auth header
        auth_header_name: Header the token is sent under
        username: Identity the token was issued to, used as a tenant hint
        metadata: Free-form extras such as ``cookies`` and ``env``
    """

    token: str
    token_type: str = DEFAULT_TOKEN_TYPE
    auth_header_name: str = DEFAULT_AUTH_HEADER_NAME
    username: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        """Safe repr that masks the token."""
        return (
            f"ArkCredential(token={mask_sensitive(self.token)!r}, "
            f"token_type={self.token_type!r}, "
            f"auth_header_name={self.auth_header_name!r}, "
            f"username={self.username!r}, "
            f"metadata_keys={sorted(self.metadata.keys())!r})"
        )


class Authenticator(ABC):
    """Source of credentials for one authenticator name (e.g. ``isp``)."""

    @property
    @abstractmethod
    def authenticator_name(self) -> str:
        """Name services use to declare that they need this authenticator."""
        ...

    @abstractmethod
    def load_credential(self, refresh: bool = False) -> ArkCredential:
        """
        Return the current credential.

        With ``refresh=True`` the authenticator re-runs its authentication
        flow and returns a fresh credential. Failures propagate.
        """
        ...


CredentialRefresher = Callable[[ArkCredential], ArkCredential]


class StaticAuthenticator(Authenticator):
    """
    Authenticator wrapping a credential obtained elsewhere.

    An optional refresher is called with the current credential when a
    refresh is requested and must return the replacement.
    """

    def __init__(
        self,
        name: str,
        credential: ArkCredential,
        refresher: Optional[CredentialRefresher] = None,
    ):
        if not name or not isinstance(name, str):
            raise ValueError("name must be a non-empty string")
        if credential is None:
            raise ValueError("credential is required")
        self._name = name
        self._credential = credential
        self._refresher = refresher

    @property
    def authenticator_name(self) -> str:
        return self._name

    @property
    def credential(self) -> ArkCredential:
        return self._credential

    def load_credential(self, refresh: bool = False) -> ArkCredential:
        if not refresh:
            return self._credential
        if self._refresher is None:
            logger.warning(
                f"load_credential: No refresher bound for '{self._name}', "
                "returning current credential"
            )
            return self._credential
        logger.info(f"load_credential: Refreshing credential for '{self._name}'")
        self._credential = self._refresher(self._credential)
        logger.debug(
            f"load_credential: Refreshed credential for '{self._name}' "
            f"token={mask_sensitive(self._credential.token)}"
        )
        return self._credential

    def __repr__(self) -> str:
        return f"StaticAuthenticator(name={self._name!r}, credential={self._credential!r})"


def authenticator_names(authenticators: List[Authenticator]) -> List[str]:
    """Names of the given authenticators, in order."""
    return [authenticator.authenticator_name for authenticator in authenticators]
