"""Async Azure Resource Manager pipeline."""

import logging
from typing import Any, Dict, Iterable, Optional

from azure.core.exceptions import (
    ClientAuthenticationError,
    HttpResponseError,
    ResourceExistsError,
    ResourceNotFoundError,
    ResourceNotModifiedError,
    map_error,
)
from azure.core.pipeline import PipelineResponse
from azure.core.pipeline.policies import HeadersPolicy, RequestIdPolicy, UserAgentPolicy
from azure.core.polling import AsyncLROPoller
from azure.core.rest import HttpRequest
from azure.mgmt.core import AsyncARMPipelineClient
from azure.mgmt.core.exceptions import ARMErrorFormat
from azure.mgmt.core.policies import ARMHttpLoggingPolicy, AsyncARMChallengeAuthenticationPolicy
from azure.mgmt.core.polling.async_arm_polling import AsyncARMPolling

from acigroup import __version__


logger = logging.getLogger(__name__)

ARM_SCOPE = "https://management.azure.com/.default"

ERROR_MAP = {
    401: ClientAuthenticationError,
    404: ResourceNotFoundError,
    409: ResourceExistsError,
    304: ResourceNotModifiedError,
}


class ArmClient:
    """Client for the Azure Resource Manager REST API.

    Requests go through an azure-core ARM pipeline: bearer token from
    ``credential`` (any ``azure.identity.aio`` credential), ARM error
    envelopes mapped to ``azure.core.exceptions`` and long-running operations
    polled by ``AsyncARMPolling``. Failed requests are not retried.
    """

    def __init__(
        self,
        credential,
        endpoint: str = "https://management.azure.com",
        timeout: float = 60.0,
        poll_interval: float = 5.0,
        scope: str = ARM_SCOPE,
        **kwargs: Any,
    ):
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout
        self.poll_interval = poll_interval
        self._client = AsyncARMPipelineClient(
            base_url=self.endpoint,
            policies=[
                RequestIdPolicy(),
                HeadersPolicy({"Accept": "application/json"}),
                UserAgentPolicy(sdk_moniker=f"acigroup/{__version__}"),
                AsyncARMChallengeAuthenticationPolicy(credential, scope),
                ARMHttpLoggingPolicy(),
            ],
            **kwargs,
        )

    async def __aenter__(self) -> "ArmClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.close()

    async def send(
        self,
        method: str,
        path: str,
        api_version: str,
        body: Optional[Dict[str, Any]] = None,
        expected: Iterable[int] = (200,),
    ) -> PipelineResponse:
        """Run a request through the pipeline; unexpected status codes raise."""
        content = {"json": body} if body is not None else {}
        request = HttpRequest(method, path, params={"api-version": api_version}, **content)
        request.url = self._client.format_url(request.url)
        logger.debug(f"{method} {request.url}")

        pipeline_response = await self._client._pipeline.run(
            request,
            stream=False,
            connection_timeout=self.timeout,
            read_timeout=self.timeout,
        )
        response = pipeline_response.http_response
        if response.status_code not in expected:
            map_error(status_code=response.status_code, response=response, error_map=ERROR_MAP)
            raise HttpResponseError(response=response, error_format=ARMErrorFormat)
        return pipeline_response

    def _poller(self, pipeline_response: PipelineResponse, deserialize) -> AsyncLROPoller:
        return AsyncLROPoller(
            self._client, pipeline_response, deserialize, AsyncARMPolling(self.poll_interval)
        )

    async def get(self, path: str, api_version: str) -> Dict[str, Any]:
        pipeline_response = await self.send("GET", path, api_version)
        return pipeline_response.http_response.json()

    async def begin_put(self, path: str, api_version: str, body: Dict[str, Any]) -> AsyncLROPoller:
        pipeline_response = await self.send("PUT", path, api_version, body, expected=(200, 201))
        return self._poller(pipeline_response, _json_body)

    async def patch(self, path: str, api_version: str, body: Dict[str, Any]) -> Dict[str, Any]:
        pipeline_response = await self.send("PATCH", path, api_version, body)
        return _json_body(pipeline_response)

    async def begin_delete(self, path: str, api_version: str) -> AsyncLROPoller:
        pipeline_response = await self.send("DELETE", path, api_version, expected=(200, 202, 204))
        return self._poller(pipeline_response, lambda pipeline_response: None)


def _json_body(pipeline_response: PipelineResponse) -> Dict[str, Any]:
    response = pipeline_response.http_response
    if not response.text():
        return {}
    return response.json()
