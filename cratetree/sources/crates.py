from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Any

import httpx

from ..errors import NotFoundError, RequestError, ResponseError
from .base import DependencyProvider

if TYPE_CHECKING:
    from ..graph.types import BuildContext


CRATES_API = "https://crates.io/api/v1"


@dataclass
class CratesSettings:
    base_url: str = CRATES_API
    timeout_seconds: int = 20
    user_agent: str = "cratetree/0.1"
    include_optional: bool = True


def open_client(settings: CratesSettings) -> httpx.Client:
    return httpx.Client(
        timeout=settings.timeout_seconds,
        headers={"User-Agent": settings.user_agent},
    )


class CratesProvider(DependencyProvider):
    """Resolve dependencies against the crates.io HTTP API.

    Responses are memoized in the BuildContext passed to each call, so a
    package's version list and each ``name@version`` dependency list are
    requested at most once per build.
    """

    def __init__(self, settings: CratesSettings, client: httpx.Client) -> None:
        self._settings = settings
        self._client = client
        self._logger = logging.getLogger(__name__)

    def direct_dependencies(self, name: str, version: str | None, context: BuildContext) -> list[str]:
        if version is None:
            raise ValueError(f"A version is required to list dependencies of {name}")
        key = f"{name}@{version}"
        cached = context.dependency_responses.get(key)
        if cached is not None:
            self._logger.debug("Dependency cache hit for %s", key)
            return list(cached)

        payload = self._get_json(f"/crates/{name}/{version}/dependencies")
        deps = _parse_dependencies(payload, key, self._settings.include_optional)
        context.dependency_responses[key] = deps
        return list(deps)

    def resolve_version(self, name: str, context: BuildContext) -> str:
        cached = context.latest_versions.get(name)
        if cached is not None:
            self._logger.debug("Version cache hit for %s", name)
            return cached

        payload = self._get_json(f"/crates/{name}/versions")
        latest = _parse_latest_version(payload, name)
        context.latest_versions[name] = latest
        return latest

    def describe(self) -> str:
        return "crates.io"

    def _get_json(self, path: str) -> Any:
        url = self._settings.base_url.rstrip("/") + path
        self._logger.debug("GET %s", url)
        try:
            response = self._client.get(url)
        except httpx.RequestError as exc:
            raise RequestError(f"Request to {url} failed: {exc}") from exc
        if not response.is_success:
            raise ResponseError(f"Registry returned status {response.status_code} for {url}")
        try:
            return response.json()
        except ValueError as exc:
            raise ResponseError(f"Invalid JSON from {url}: {exc}") from exc


def _parse_dependencies(payload: Any, key: str, include_optional: bool) -> list[str]:
    entries = payload.get("dependencies") if isinstance(payload, dict) else None
    if not isinstance(entries, list):
        raise ResponseError(f"Unexpected dependencies payload for {key}")
    names: list[str] = []
    for entry in entries:
        if not isinstance(entry, dict) or not entry.get("crate_id"):
            raise ResponseError(f"Malformed dependency record for {key}")
        if entry.get("kind") == "dev":
            continue
        if not include_optional and entry.get("optional"):
            continue
        names.append(str(entry["crate_id"]))
    return names


def _parse_latest_version(payload: Any, name: str) -> str:
    versions = payload.get("versions") if isinstance(payload, dict) else None
    if not isinstance(versions, list):
        raise ResponseError(f"Unexpected versions payload for {name}")
    if not versions:
        raise NotFoundError(f"No versions published for {name}")
    first = versions[0]
    if not isinstance(first, dict) or not first.get("num"):
        raise ResponseError(f"Malformed version record for {name}")
    return str(first["num"])
