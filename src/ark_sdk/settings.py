"""SDK settings loaded from environment variables using Pydantic Settings."""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class ArkSdkSettings(BaseSettings):
    """Process-wide knobs read from the environment."""

    # Deployment environment hint, consulted only when no stronger signal exists
    DEPLOY_ENV: Optional[str] = None

    # Certificate verification
    ARK_DISABLE_CERTIFICATE_VERIFICATION: Optional[str] = None
    SSL_CERT_VERIFY: Optional[str] = None

    # Rich request/response trace
    ARK_SDK_HTTP_TRACE: bool = False

    # Timeouts (seconds)
    ARK_SDK_CONNECT_TIMEOUT: float = 5.0
    ARK_SDK_READ_TIMEOUT: float = 30.0
    ARK_SDK_WRITE_TIMEOUT: float = 10.0

    # Cloud region, used to detect GovCloud deployments
    AWS_REGION: Optional[str] = None
    AWS_DEFAULT_REGION: Optional[str] = None

    class Config:
        case_sensitive = True
        env_file = None  # Use system env only

    @property
    def verify_certificates(self) -> bool:
        """False when either override disables TLS verification."""
        if self.ARK_DISABLE_CERTIFICATE_VERIFICATION:
            return False
        return self.SSL_CERT_VERIFY != "0"


def load_settings() -> ArkSdkSettings:
    """Read settings fresh from the current environment."""
    return ArkSdkSettings()


@lru_cache()
def get_settings() -> ArkSdkSettings:
    """Get cached settings instance."""
    return ArkSdkSettings()
