from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote, urljoin, urlparse

import httpx

from guestform.config import Settings, get_settings
from guestform.errors import ResourceFetchError


logger = logging.getLogger(__name__)


@dataclass
class ResourceConfig:
    template_location: str
    body_font_location: str
    symbol_font_location: str
    base_url: str | None
    timeout_seconds: float | None


@dataclass(frozen=True)
class TemplateResource:
    """Raw bytes for one generation call. Never cached between calls."""

    template: bytes
    body_font: bytes
    symbol_font: bytes


def build_resource_config(settings: Settings | None = None) -> ResourceConfig:
    settings = settings or get_settings()
    return ResourceConfig(
        template_location=settings.template_location,
        body_font_location=settings.body_font_location,
        symbol_font_location=settings.symbol_font_location,
        base_url=settings.resource_base_url,
        timeout_seconds=settings.resource_fetch_timeout_seconds,
    )


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _is_http(location: str) -> bool:
    return location.lower().startswith(('http://', 'https://'))


class ResourceLoader:
    def __init__(self, cfg: ResourceConfig, *, transport: httpx.AsyncBaseTransport | None = None):
        self.cfg = cfg
        self._transport = transport

    def resolve(self, location: str) -> str:
        token = str(location or '').strip()
        if not token:
            raise ResourceFetchError(repr(location), 'empty resource location')
        if _is_http(token):
            return token
        if token.lower().startswith('file://'):
            return unquote(urlparse(token).path)
        if self.cfg.base_url:
            return urljoin(self.cfg.base_url.rstrip('/') + '/', token.lstrip('/'))
        path = Path(token).expanduser()
        if not path.is_absolute():
            path = _repo_root() / path
        return str(path)

    async def load(self) -> TemplateResource:
        locations = (
            self.cfg.template_location,
            self.cfg.body_font_location,
            self.cfg.symbol_font_location,
        )
        async with httpx.AsyncClient(timeout=self.cfg.timeout_seconds, transport=self._transport) as client:
            results = await asyncio.gather(
                *(self.fetch(client, location) for location in locations),
                return_exceptions=True,
            )

        for result in results:
            if isinstance(result, BaseException):
                raise result

        template, body_font, symbol_font = results
        logger.debug(
            'Loaded template (%d bytes), body font (%d bytes), symbol font (%d bytes)',
            len(template),
            len(body_font),
            len(symbol_font),
        )
        return TemplateResource(template=template, body_font=body_font, symbol_font=symbol_font)

    async def fetch(self, client: httpx.AsyncClient, location: str) -> bytes:
        resolved = self.resolve(location)
        if _is_http(resolved):
            payload = await self._fetch_remote(client, resolved)
        else:
            payload = await self._read_local(Path(resolved))
        if not payload:
            raise ResourceFetchError(resolved, 'resource is empty')
        return payload

    async def _fetch_remote(self, client: httpx.AsyncClient, url: str) -> bytes:
        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ResourceFetchError(
                url,
                f'{exc.response.status_code} {exc.response.reason_phrase}',
            ) from exc
        except httpx.HTTPError as exc:
            raise ResourceFetchError(url, f'{type(exc).__name__}: {exc}') from exc
        return response.content

    async def _read_local(self, path: Path) -> bytes:
        try:
            return await asyncio.to_thread(path.read_bytes)
        except (OSError, ValueError) as exc:
            raise ResourceFetchError(str(path), f'{type(exc).__name__}: {exc}') from exc
