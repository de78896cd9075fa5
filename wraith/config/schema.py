"""Configuration schema using Pydantic."""

from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class DispatcherConfig(BaseModel):
    """Dispatcher configuration."""
    prefix: str = "!"  # Plain text, "@client" or "@me:<text>"
    self_id: str = ""  # The bot's own user id, set on ready if empty
    ignore_self: bool = True  # Drop the bot's own messages unless prefixed with @me:


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: str = (
        "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
        "<cyan>{name}</cyan> - <level>{message}</level>"
    )
    colorize: bool = True


class ConsoleConfig(BaseModel):
    """Console channel configuration."""
    username: str = "user"
    channel_type: Literal["dm", "group", "text"] = "dm"


class Config(BaseSettings):
    """Root configuration for wraith."""
    dispatcher: DispatcherConfig = Field(default_factory=DispatcherConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    console: ConsoleConfig = Field(default_factory=ConsoleConfig)

    class Config:
        env_prefix = "WRAITH_"
        env_nested_delimiter = "__"
