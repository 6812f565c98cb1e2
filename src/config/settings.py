"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use LINEMARK_ prefix (e.g., LINEMARK_STRICT_MODE=true).

Settings can also be loaded from a .env file in the project root.
"""

from typing import Tuple

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use LINEMARK_ prefix.

    Examples:
        LINEMARK_STRICT_MODE=true
        LINEMARK_ORDERED_LIST_PATTERN='^[0-9]+[.)] '
    """

    model_config = SettingsConfigDict(
        env_prefix="LINEMARK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Error handling
    strict_mode: bool = Field(
        default=False,
        description="Strict mode: raise recoverable errors instead of reporting them",
    )

    # Ordered list renumbering
    ordered_list_pattern: str = Field(
        default=r"^[0-9]+\. ",
        description="Regular expression matching an author-written list number",
    )

    ordered_list_replacement: str = Field(
        default="1. ",
        description="Canonical list number substituted for ordered_list_pattern",
    )

    # Nesting indent markers
    indent_first: str = Field(
        default=" " * 4,
        description="Indent marking the first nesting level of a list",
    )

    indent_second: str = Field(
        default=" " * 8,
        description="Indent marking the second nesting level of a list",
    )

    def orderedList_tokens(self) -> Tuple[str, str, str]:
        """
        Reserved ordered list tokens, top level first.

        Returns:
            (top level, first indent, second indent)

        Example:
            >>> AppSettings().orderedList_tokens()
            ('1. ', '    1. ', '        1. ')
        """
        marker = self.ordered_list_replacement
        return (marker, self.indent_first + marker, self.indent_second + marker)

    def bulletList_tokens(self) -> Tuple[str, str, str]:
        """
        Reserved bullet list tokens, top level first.

        Example:
            >>> AppSettings().bulletList_tokens()
            ('- ', '    - ', '        - ')
        """
        return ("- ", self.indent_first + "- ", self.indent_second + "- ")


# Singleton instance - import this in your code
appsettings = AppSettings()
