"""
Endpoint URI and CSRF credential resolution.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from client.src.page_config import PageConfig


@dataclass(frozen=True)
class CsrfToken:
    header: Optional[str]
    parameter: Optional[str]
    token: Optional[str]

    @property
    def present(self) -> bool:
        return bool(self.header) and bool(self.token)


def resolve_uri(root: str, path: str) -> str:
    """Join ``root`` and ``path`` after dropping one trailing ``/`` from root.

    No other normalization happens, so ``resolve_uri("/a//", "/b")`` is
    ``"/a//b"``.
    """
    if root.endswith("/"):
        root = root[:-1]
    return root + path


def resolve_csrf(config: PageConfig) -> CsrfToken:
    return CsrfToken(
        header=config.csrf_header or None,
        parameter=config.csrf_parameter or None,
        token=config.csrf_token or None,
    )


class Resolver:
    """Bundles URI and CSRF resolution for one page configuration."""

    def __init__(self, config: PageConfig):
        self.config = config
        self.csrf = resolve_csrf(config)

    def uri(self, path: str) -> str:
        return resolve_uri(self.config.context_root, path)

    def csrf_headers(self) -> Dict[str, str]:
        """Headers to send with unsafe requests; empty when CSRF is not declared."""
        if not self.csrf.present:
            return {}
        return {self.csrf.header: self.csrf.token}
