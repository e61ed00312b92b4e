"""
Configuration types for the http-service client.

This module contains Pydantic models that define the configuration structure
used by ``HttpService`` and the shipped resilience policies.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..utils.data_masker import MaskOptions


class CircuitBreakerConfig(BaseModel):
    """Circuit breaker configuration."""

    model_config = ConfigDict(populate_by_name=True)

    failureThreshold: int = Field(
        default=3,
        alias="failure_threshold",
        ge=1,
        description="Consecutive failures before the circuit opens",
    )
    resetTimeout: float = Field(
        default=60,
        alias="reset_timeout",
        gt=0,
        description="Seconds the circuit stays open before a trial call is allowed",
    )


class HttpServiceOptions(BaseModel):
    """Client-wide options for ``HttpService``.

    All fields are optional:
    - headers: default headers merged over the JSON content headers
    - timeout: default request timeout in seconds
    - resilience_policy: policy wrapped around every call
    - logger: logger receiving diagnostics (built from log_level if absent)
    - hide_properties / mask_properties: redaction rules for logged data
    - transport / client_options: forwarded to ``httpx.AsyncClient``
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True, frozen=True, populate_by_name=True
    )

    headers: Dict[str, str] = Field(default_factory=dict, description="Default headers")
    timeout: Optional[float] = Field(default=30.0, description="Request timeout in seconds")
    resilience_policy: Optional[Any] = Field(
        default=None,
        alias="resiliencePolicy",
        description="Default resilience policy (execute-once when absent)",
    )
    logger: Optional[Any] = Field(default=None, description="Logger or LoggerAdapter")
    log_level: Literal["debug", "info", "warn", "error"] = Field(
        default="info", alias="logLevel", description="Level of the default logger"
    )
    hide_properties: List[str] = Field(
        default_factory=list,
        alias="hideProperties",
        description="Field names removed from logged data",
    )
    mask_properties: List[str] = Field(
        default_factory=list,
        alias="maskProperties",
        description="Field names masked in logged data",
    )
    log_resilience_events: bool = Field(
        default=True,
        alias="logResilienceEvents",
        description="Log every policy attempt (debug on success, warning on failure)",
    )
    coalesce_token_fetch: bool = Field(
        default=False,
        alias="coalesceTokenFetch",
        description="Share one in-flight token fetch between concurrent requests",
    )
    refresh_expired_tokens: bool = Field(
        default=False,
        alias="refreshExpiredTokens",
        description="Fetch a new token when the cached JWT has expired",
    )
    transport: Optional[Any] = Field(
        default=None, description="Custom httpx.AsyncBaseTransport"
    )
    client_options: Dict[str, Any] = Field(
        default_factory=dict,
        alias="clientOptions",
        description="Extra keyword arguments for httpx.AsyncClient",
    )
    interceptors: List[Any] = Field(
        default_factory=list,
        description="Extra interceptors, run after the bearer auth interceptor",
    )

    @property
    def mask_options(self) -> MaskOptions:
        """Redaction rules as MaskOptions."""
        return MaskOptions(
            hide_properties=self.hide_properties,
            mask_properties=self.mask_properties,
        )


class HttpServiceConfig(BaseModel):
    """Base URL plus client options, as loaded from the environment."""

    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    base_url: str = Field(..., alias="baseUrl", description="Base URL of the endpoint")
    options: HttpServiceOptions = Field(default_factory=HttpServiceOptions)
