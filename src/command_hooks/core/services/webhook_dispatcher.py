from __future__ import annotations

import httpx

from command_hooks.constants import DEFAULT_DISPATCH_TIMEOUT
from command_hooks.core.common.exceptions import DispatchError
from command_hooks.core.common.logging_utils import LogContext, get_logger, redact_url
from command_hooks.core.domain.command_results import DispatchResult
from command_hooks.core.domain.commands import ParsedArguments
from command_hooks.core.interfaces.dispatcher_interface import IWebhookDispatcher


class HttpxWebhookDispatcher(IWebhookDispatcher):
    """POSTs resolved arguments as JSON to a command's webhook.

    No retries are attempted. Any HTTP status is returned to the caller;
    only transport failures raise.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_DISPATCH_TIMEOUT,
    ) -> None:
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)
        self.timeout = timeout
        self._events = get_logger(__name__)

    async def invoke(self, url_call: str, args: ParsedArguments) -> DispatchResult:
        with LogContext(self._events, url=redact_url(url_call)) as events:
            try:
                response = await self.client.post(
                    url_call,
                    json=dict(args),
                    headers={"Content-Type": "application/json"},
                    timeout=self.timeout,
                )
            except httpx.TimeoutException as e:
                events.warning("webhook_timeout", timeout=self.timeout)
                raise DispatchError(
                    f"Webhook timed out after {self.timeout:g}s",
                    url=url_call,
                ) from e
            except httpx.RequestError as e:
                events.warning("webhook_unreachable", error=str(e))
                raise DispatchError(
                    f"Could not reach webhook ({e})", url=url_call
                ) from e

            result = DispatchResult(status_code=response.status_code, body=response.text)
            events.info(
                "webhook_called", status_code=result.status_code, ok=result.ok
            )
        return result

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()
