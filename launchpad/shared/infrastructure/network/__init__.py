"""HTTP transport, middleware and the authenticated request pipeline."""

from .auth_pipeline import AuthenticatedRequestPipeline, RefreshCycle
from .transport import HttpTransport, RequestDescriptor, Response

__all__ = ["AuthenticatedRequestPipeline", "RefreshCycle", "HttpTransport", "RequestDescriptor", "Response"]
