# === NAVMAP v1 ===
# {
#   "module": "Quest",
#   "purpose": "Public API for fluent, first-failure request chains",
#   "sections": [
#     {"id": "exports", "name": "Public exports", "anchor": "exports", "kind": "api"}
#   ]
# }
# === /NAVMAP ===

"""Fluent HTTP request chains that stop at the first failure.

Build a request, send it, check and decode the response, and look at the
outcome once at the end:

    >>> from Quest import get, Slot
    >>> user = Slot()
    >>> err = (
    ...     get("https://api.example.com/users/:id")
    ...     .param("id", "42")
    ...     .header("X-Trace", "abc")
    ...     .send()
    ...     .expect_success()
    ...     .expect_type("json")
    ...     .get_json(user)
    ...     .done()
    ... )  # doctest: +SKIP

Any step that fails records the error; every later step is skipped, and
``done()`` returns that first error (``None`` on success). ``next()`` starts
a follow-up request that inherits the failure, so a multi-call sequence can
also be checked once at the very end.
"""

from .cancellation import CancellationToken
from .capabilities import ChainFactory, ContinuationStarter, RequestBuilder, ResponseInspector
from .continuation import Continuation
from .delegation import ContinuationWrapper, Delegate, FactoryWrapper, RequestWrapper, ResponseWrapper
from .errors import QuestError, RequestError, ResponseError, StepFailure, TransportFailure
from .factory import (
    RequestFactory,
    default_factory,
    delete,
    get,
    new,
    post,
    put,
    set_default_factory,
)
from .multipart import MultipartForm, copy_encode, json_encode
from .request import PendingRequest
from .response import CONTENT_TYPE_ALIASES, PendingResponse, Slot
from .settings import QuestSettings
from .steps import request_step, response_step

__all__ = [
    "CancellationToken",
    "ChainFactory",
    "ContinuationStarter",
    "RequestBuilder",
    "ResponseInspector",
    "Continuation",
    "ContinuationWrapper",
    "Delegate",
    "FactoryWrapper",
    "RequestWrapper",
    "ResponseWrapper",
    "QuestError",
    "RequestError",
    "ResponseError",
    "StepFailure",
    "TransportFailure",
    "RequestFactory",
    "default_factory",
    "set_default_factory",
    "new",
    "get",
    "post",
    "put",
    "delete",
    "MultipartForm",
    "copy_encode",
    "json_encode",
    "PendingRequest",
    "PendingResponse",
    "Slot",
    "CONTENT_TYPE_ALIASES",
    "QuestSettings",
    "request_step",
    "response_step",
]
