from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    app_name: str = 'Guest Room Register Form Filler'

    # Template + fonts. Relative locations resolve against resource_base_url
    # when it is set, otherwise against the repository root.
    template_location: str = Field(
        default='assets/forms/Revised_Register_Form.pdf',
        validation_alias=AliasChoices('TEMPLATE_LOCATION', 'PDF_TEMPLATE_PATH'),
    )
    body_font_location: str = Field(
        default='assets/fonts/Ubuntu-R.ttf',
        validation_alias=AliasChoices('BODY_FONT_LOCATION', 'PDF_FONT_PATH'),
    )
    symbol_font_location: str = Field(
        default='assets/fonts/Wingdings2.ttf',
        validation_alias=AliasChoices('SYMBOL_FONT_LOCATION', 'ICONS_FONT_PATH'),
    )
    resource_base_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices('RESOURCE_BASE_URL', 'ORIGIN_URL'),
    )
    # None disables the HTTP timeout; callers own deadlines.
    resource_fetch_timeout_seconds: float | None = None

    # "P" is the heavy check mark in Wingdings 2.
    checkmark_glyph: str = 'P'
    display_timezone: str = 'Asia/Kolkata'

    output_media_type: str = 'application/pdf'
    output_filename: str = 'guest_room_register_form.pdf'

    log_level: str = 'INFO'


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
