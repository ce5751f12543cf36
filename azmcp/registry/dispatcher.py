"""
Dispatcher - uniform execution of registered operations.

Every invocation, whether from the CLI or an MCP tool call, goes through
Dispatcher.dispatch: resolve the path, bind arguments, await the handler,
time it and fold the outcome into the invocation's CommandResponse.
Validation and execution failures never propagate past this boundary.
"""

import asyncio
import logging
import time
from typing import Any, Callable, Mapping, Optional

from pydantic import BaseModel

from ..config.settings import is_enabled
from ..core.context import InvocationContext
from ..core.exceptions import OperationCancelled, OperationError
from ..utils.response import STATUS_BAD_REQUEST, STATUS_INTERNAL_ERROR, STATUS_OK, CommandResponse
from .arguments import bind_arguments
from .operation_registry import Operation, OperationIndex, OperationResult

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class Dispatcher:
    """
    Executes operations resolved from an OperationIndex.

    Holds no per-invocation state, so one instance serves concurrent
    invocations.
    """

    def __init__(
        self,
        index: OperationIndex,
        clock: Clock = time.perf_counter,
        expose_error_details: Optional[bool] = None,
    ):
        """
        Args:
            index: Lookup index built from the command tree
            clock: Monotonic clock in seconds, replaceable in tests
            expose_error_details: Include raw exception text in messages;
                defaults to the ``expose_error_details`` feature flag
        """
        self.index = index
        self.clock = clock
        self._expose_error_details = expose_error_details

    @property
    def expose_error_details(self) -> bool:
        if self._expose_error_details is None:
            return is_enabled('expose_error_details')
        return self._expose_error_details

    async def dispatch(
        self,
        path: str,
        raw_arguments: Optional[Mapping[str, Any]],
        context: InvocationContext,
    ) -> CommandResponse:
        """
        Execute the operation registered under ``path``.

        Args:
            path: Flattened operation path (e.g. "pg-server-list")
            raw_arguments: Raw argument name -> value pairs
            context: Invocation context holding the fresh response envelope

        Returns:
            The context's CommandResponse with status, message, duration
            and results filled in

        Raises:
            OperationNotFound: If ``path`` is not registered; no handler runs
        """
        operation = self.index.resolve(path)
        response = context.response

        logger.debug(f"Executing '{path}'")
        start = self.clock()
        try:
            bound = bind_arguments(operation.arguments, raw_arguments, model=operation.arguments_model)
            if not bound.is_valid:
                response.status = STATUS_BAD_REQUEST
                response.message = bound.message
                logger.warning(f"Invalid arguments for '{path}': {bound.message}")
            else:
                payload = await self._execute(path, operation, context, bound.arguments)
                self._apply_payload(response, payload)
        except OperationError as e:
            if e.status_code >= STATUS_INTERNAL_ERROR:
                logger.exception(f"Operation '{path}' failed")
            else:
                logger.warning(f"Operation '{path}' rejected: {e}")
            self._apply_error(path, response, e)
        except Exception as e:
            logger.exception(f"An exception occurred while executing '{path}'")
            self._apply_error(path, response, e)
        finally:
            response.duration = self._elapsed_ms(start)

        logger.info(f"Finished '{path}': status {response.status} in {response.duration} ms")
        return response

    async def _execute(
        self,
        path: str,
        operation: Operation,
        context: InvocationContext,
        arguments: BaseModel,
    ) -> Any:
        """Await the handler, abandoning it if the invocation is cancelled."""
        task = asyncio.ensure_future(operation.handler(context, arguments))
        waiter = asyncio.ensure_future(context.cancellation.wait())
        try:
            done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
            raise
        finally:
            waiter.cancel()

        if task not in done:
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
            raise OperationCancelled(f"Operation cancelled: '{path}' was cancelled by the caller.")

        if task.cancelled():
            raise OperationCancelled(f"Operation cancelled: '{path}' was cancelled before completing.")

        return task.result()

    def _apply_payload(self, response: CommandResponse, payload: Any) -> None:
        if isinstance(payload, OperationResult):
            response.status = payload.status
            response.message = payload.message
            payload = payload.results

        if payload is not None:
            response.results = payload

        # Success responses are never ambiguous between "empty" and "unset"
        if response.status == STATUS_OK and response.results is None:
            response.results = []

    def _apply_error(self, path: str, response: CommandResponse, error: Exception) -> None:
        response.results = None
        if isinstance(error, OperationError):
            response.status = error.status_code
            response.message = str(error)
        else:
            response.status = STATUS_INTERNAL_ERROR
            response.message = self._error_message(path, error)

    def _error_message(self, path: str, error: Exception) -> str:
        if self.expose_error_details:
            return str(error) or type(error).__name__
        return f"An error occurred while executing '{path}'."

    def _elapsed_ms(self, start: float) -> int:
        return max(0, int(round((self.clock() - start) * 1000)))
