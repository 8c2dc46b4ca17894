"""resting -- invoke REST endpoints and turn their JSON/XML responses into typed entities.

A request flows through a short pipeline::

    RestingBuilder / resting.get_by_json / ...   configuration
        -> ServiceContext                         frozen request description
        -> ServiceAccessor                        one httpx round trip
        -> ServiceResponse (ContentData)          status, headers, body
        -> Transformer (JSON or XML)              typed entities

Typical use::

    import resting

    products = resting.get_by_json("http://shop.local/products", 8080, Product)

    response = resting.post("http://shop.local/orders", message='{"id": 1}')
    print(response.describe())

Modules:
    api: one-call shortcuts (``get``, ``get_by_json``, ...).
    builder: :class:`RestingBuilder` for non-default settings.
    accessor: :class:`ServiceAccessor`, the httpx-backed executor.
    component: :class:`ServiceResponse` and :class:`ContentData`.
    transform: JSON and XML transformers.
    models: enums, service contexts and payloads.
    config: defaults and environment/project-file resolution.
    exceptions: exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting with Rich support.
    app: the ``resting`` command line.
"""

__version__ = "0.8.0"

from resting.accessor import ServiceAccessor, access  # noqa: E402
from resting.api import (  # noqa: E402
    delete,
    delete_by_json,
    delete_by_xml,
    get,
    get_by_json,
    get_by_xml,
    post,
    post_by_json,
    post_by_xml,
    put,
    put_by_json,
    put_by_xml,
)
from resting.builder import RestingBuilder  # noqa: E402
from resting.component import ContentData, ServiceResponse  # noqa: E402
from resting.exceptions import (  # noqa: E402
    BodyReadError,
    ConfigurationError,
    ConstructionError,
    DecodeError,
    ParseError,
    RestingError,
    TransportError,
)
from resting.models import (  # noqa: E402
    Alias,
    EncodingType,
    Header,
    RequestParams,
    TimeoutConfig,
    TransformationType,
    Verb,
    make_context,
)

__all__ = [
    "__version__",
    "Alias",
    "BodyReadError",
    "ConfigurationError",
    "ConstructionError",
    "ContentData",
    "DecodeError",
    "EncodingType",
    "Header",
    "ParseError",
    "RequestParams",
    "RestingBuilder",
    "RestingError",
    "ServiceAccessor",
    "ServiceResponse",
    "TimeoutConfig",
    "TransformationType",
    "TransportError",
    "Verb",
    "access",
    "delete",
    "delete_by_json",
    "delete_by_xml",
    "get",
    "get_by_json",
    "get_by_xml",
    "make_context",
    "post",
    "post_by_json",
    "post_by_xml",
    "put",
    "put_by_json",
    "put_by_xml",
]
