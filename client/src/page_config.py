"""
Configuration normally embedded in the hosting page.

The page declares the context root and, optionally, CSRF credentials as
``<meta>`` elements::

    <meta name="context-root" content="/app/">
    <meta name="csrf-header" content="X-CSRF-TOKEN">
    <meta name="csrf-parameter" content="_csrf">
    <meta name="csrf-token" content="...">
"""

from typing import Optional

from bs4 import BeautifulSoup
from pydantic import BaseModel, ConfigDict, Field

from client.src.config import ClientSettings


def _meta_content(soup: BeautifulSoup, name: str) -> Optional[str]:
    tag = soup.find("meta", attrs={"name": name})
    if tag is None:
        return None
    content = tag.get("content")
    if content is None:
        return None
    return str(content).strip()


class PageConfig(BaseModel):
    """Context root plus the three optional CSRF values."""

    model_config = ConfigDict(frozen=True)

    context_root: str = Field(default="/", description="Deployment base path")
    csrf_header: Optional[str] = Field(default=None, description="CSRF header name")
    csrf_parameter: Optional[str] = Field(default=None, description="CSRF form field name")
    csrf_token: Optional[str] = Field(default=None, description="CSRF token value")

    @classmethod
    def from_html(cls, html: str) -> "PageConfig":
        """Read the configuration from the page's meta elements.

        Missing elements leave the corresponding field unset; a missing
        ``context-root`` falls back to ``/``.
        """
        soup = BeautifulSoup(html or "", "html.parser")
        return cls(
            context_root=_meta_content(soup, "context-root") or "/",
            csrf_header=_meta_content(soup, "csrf-header") or None,
            csrf_parameter=_meta_content(soup, "csrf-parameter") or None,
            csrf_token=_meta_content(soup, "csrf-token") or None,
        )

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> "PageConfig":
        return cls(
            context_root=settings.context_root,
            csrf_header=settings.csrf_header,
            csrf_parameter=settings.csrf_parameter,
            csrf_token=settings.csrf_token,
        )
