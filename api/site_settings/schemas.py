"""
Pydantic schemas for site settings. Wire names are camelCase.

Every field is optional: a PATCH carries only what changed.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _Group(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class GeneralSettings(_Group):
    site_title: str | None = Field(default=None, alias="siteTitle", max_length=255)
    site_description: str | None = Field(default=None, alias="siteDescription")
    logo_url: str | None = Field(default=None, alias="logoUrl", max_length=2048)
    homepage_listing_count: int | None = Field(default=None, alias="homepageListingCount", ge=1, le=100)


class SeoSettings(_Group):
    global_seo_title: str | None = Field(default=None, alias="globalSeoTitle", max_length=255)
    global_seo_description: str | None = Field(default=None, alias="globalSeoDescription")


class ScriptsSettings(_Group):
    header_scripts: str | None = Field(default=None, alias="headerScripts")


class AppearanceSettings(_Group):
    primary_font_color: str | None = Field(default=None, alias="primaryFontColor", max_length=50)


class SiteSettingsPatch(_Group):
    general: GeneralSettings | None = None
    seo: SeoSettings | None = None
    scripts: ScriptsSettings | None = None
    appearance: AppearanceSettings | None = None
