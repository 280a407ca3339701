"""Store configuration."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .actions import ActionTypes


class StoreConfig(BaseSettings):
    """
    Store configuration.

    Values come from keyword arguments first, then from environment
    variables prefixed with ``REACTIVE_STORE_`` (``REACTIVE_STORE_NAME``,
    ``REACTIVE_STORE_INIT_ACTION_TYPE``, ``REACTIVE_STORE_LOG_ACTIONS``),
    then from the defaults below. Pass ``_env_prefix`` to read another
    prefix.

    Attributes:
        name: Optional name for logging and repr.
        init_action_type: Type of the reserved action dispatched on creation
            and reducer replacement.
        log_actions: Log the type of every dispatched action at DEBUG level.
    """

    model_config = SettingsConfigDict(
        env_prefix="REACTIVE_STORE_",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    name: str | None = None
    init_action_type: str = Field(default=ActionTypes.INIT, min_length=1)
    log_actions: bool = False
