"""Response capture components.

:class:`ContentData` holds the raw bytes of one response body and decodes
them on demand; :class:`ServiceResponse` bundles status, headers and content
for one HTTP round trip.
"""

from resting.component.content import ContentData
from resting.component.response import ServiceResponse

__all__ = ["ContentData", "ServiceResponse"]
