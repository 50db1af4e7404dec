import logging
import time
from typing import Any

import httpx
from pydantic import ValidationError

from otf_level.models.level import ScaleRecord

LOGGER = logging.getLogger(__name__)

# Per-phase limits (read, write, pool) of 2s, with 10s to establish a connection.
DEFAULT_TIMEOUT = httpx.Timeout(2.0, connect=10.0)

SCALE_QUERY = """
query scaleQuery($qspec: QueryInput!) {
  q(qspec: $qspec) {
    OtfScale {
      partiallyAchieved
      progressionLevel
      scaleItemId
      achieved
      high
      low
    }
  }
}
""".strip()


class ScaleLookupError(RuntimeError):
    pass


class ScaleNotFoundError(ScaleLookupError):
    def __init__(self, prog_level: str) -> None:
        super().__init__(f"no scale registered for progression level: {prog_level}")
        self.prog_level = prog_level


def build_scale_query(prog_level: str) -> dict[str, Any]:
    return {
        "query": SCALE_QUERY,
        "variables": {
            "qspec": {
                "queryType": "findByValue",
                "queryValue": prog_level,
            },
        },
    }


def build_lookup_headers(access_token: str) -> dict[str, str]:
    headers = {
        "Content-Type": "application/json",
        "Accept": "application/json",
        "Connection": "keep-alive",
        "DNT": "1",
    }
    token = access_token.strip()
    if token:
        headers["Authorization"] = token if token.lower().startswith("bearer ") else f"Bearer {token}"
    return headers


def extract_scale_record(payload: Any, prog_level: str) -> ScaleRecord:
    """Pull the first OtfScale record out of a graphql response body."""
    if not isinstance(payload, dict):
        raise ScaleLookupError("Unexpected scale lookup response: body is not a JSON object")

    data = payload.get("data")
    if data is None and payload.get("errors"):
        errors = payload["errors"] if isinstance(payload["errors"], list) else [payload["errors"]]
        messages = [str(item.get("message", item)) if isinstance(item, dict) else str(item) for item in errors]
        raise ScaleLookupError(f"Scale lookup query failed: {'; '.join(messages)}")

    query_result = data.get("q") if isinstance(data, dict) else None
    records = query_result.get("OtfScale") if isinstance(query_result, dict) else None
    if isinstance(records, dict):
        records = [records]
    if not records or not isinstance(records, list):
        raise ScaleNotFoundError(prog_level)

    record = records[0]
    if not isinstance(record, dict) or not record:
        raise ScaleNotFoundError(prog_level)

    try:
        return ScaleRecord.model_validate(record)
    except ValidationError as exc:
        raise ScaleLookupError(f"Invalid scale record for progression level {prog_level}: {exc}") from exc


class ScaleLookupClient:
    """Looks up progression-level scales on the n3w graphql endpoint.

    Owns one pooled ``httpx.AsyncClient`` for the lifetime of the service.
    Pass ``client`` to substitute the transport (tests use ``httpx.MockTransport``).
    """

    def __init__(self, url: str, access_token: str = "", *, client: httpx.AsyncClient | None = None) -> None:
        self.url = url
        self._headers = build_lookup_headers(access_token)
        self._client = client or httpx.AsyncClient(timeout=DEFAULT_TIMEOUT)

    async def fetch_scale(self, prog_level: str) -> ScaleRecord:
        started = time.perf_counter()
        try:
            response = await self._client.post(
                self.url,
                headers=self._headers,
                json=build_scale_query(prog_level),
            )
        except httpx.RequestError as exc:
            raise ScaleLookupError(f"Network call failed: {exc}") from exc
        finally:
            LOGGER.debug("scale lookup for %s took %.0fms", prog_level, (time.perf_counter() - started) * 1000)

        if response.status_code != httpx.codes.OK:
            raise ScaleLookupError(f"Network call failed with response: {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise ScaleLookupError("Cannot decode scale lookup response") from exc

        return extract_scale_record(payload, prog_level)

    async def aclose(self) -> None:
        await self._client.aclose()
