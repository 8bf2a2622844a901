"""Configuration settings for the Mode Analytics provider.

This module defines the provider configuration: the Mode host, the API
token/secret pair used for Basic authentication and the workspace the
provider manages. Settings are loaded from environment variables and
.env files; explicit values passed at construction take precedence.
"""

from typing import Dict, List, Literal, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..exceptions import ConfigurationError

# Environment variable backing each required setting
REQUIRED_SETTINGS: Dict[str, str] = {
    "mode_host": "MODE_ANALYTICS_HOST",
    "api_token": "MODE_ANALYTICS_API_TOKEN",
    "api_secret": "MODE_ANALYTICS_API_SECRET",
    "workspace_id": "MODE_ANALYTICS_WORKSPACE_ID",
}


class Settings(BaseSettings):
    """Provider settings loaded from environment variables.

    Every required value can be given explicitly (the provider block in
    Terraform) or through its ``MODE_ANALYTICS_*`` environment variable.
    Explicit values win. Completeness is checked by
    :meth:`require_complete` rather than at construction so that the
    provider can report every missing value at once.

    :param mode_host: Mode host URL, e.g. ``https://app.mode.com``
    :type mode_host: Optional[str]
    :param api_token: API token used as the Basic auth username
    :type api_token: Optional[str]
    :param api_secret: API secret used as the Basic auth password
    :type api_secret: Optional[str]
    :param workspace_id: Workspace (organization) identifier
    :type workspace_id: Optional[str]
    :param request_timeout: Per-request timeout in seconds
    :type request_timeout: float
    :param log_level: Logging level for the provider
    :type log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    mode_host: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("mode_host", "MODE_ANALYTICS_HOST"),
        description="Mode Analytics host URL",
    )
    api_token: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("api_token", "MODE_ANALYTICS_API_TOKEN"),
        description="API token for Mode Analytics",
    )
    api_secret: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("api_secret", "MODE_ANALYTICS_API_SECRET"),
        description="API secret for Mode Analytics",
    )
    workspace_id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("workspace_id", "MODE_ANALYTICS_WORKSPACE_ID"),
        description="Workspace ID for Mode Analytics",
    )

    request_timeout: float = Field(
        30.0,
        validation_alias=AliasChoices(
            "request_timeout", "MODE_ANALYTICS_REQUEST_TIMEOUT"
        ),
        description="Per-request timeout in seconds",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "INFO", description="Logging level"
    )

    @field_validator("mode_host")
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        """Normalize the host so URL templates can append ``/api/...``.

        :param v: The configured host
        :type v: Optional[str]
        :return: Host without trailing slashes
        :rtype: Optional[str]
        """
        if v is None:
            return v
        return v.strip().rstrip("/")

    def missing_required(self) -> List[str]:
        """List the environment variable names of unset required settings.

        :return: Names of the missing settings, in declaration order
        :rtype: List[str]
        """
        missing = []
        for field_name, env_name in REQUIRED_SETTINGS.items():
            value = getattr(self, field_name)
            if not value or not value.strip():
                missing.append(env_name)
        return missing

    def require_complete(self) -> "Settings":
        """Ensure every required setting is present.

        :return: This settings instance
        :rtype: Settings
        :raises ConfigurationError: If any required setting is missing
        """
        missing = self.missing_required()
        if missing:
            raise ConfigurationError(
                "All of mode_host, api_token, api_secret, and workspace_id must be "
                "set either as environment variables or in the provider "
                f"configuration block (missing: {', '.join(missing)})",
                missing=missing,
            )
        return self
