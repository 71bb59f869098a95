"""Typed calls to the remote API, all routed through the authenticated pipeline."""

from __future__ import annotations

from typing import Any, Dict

from launchpad.shared.core.result import Result
from launchpad.shared.infrastructure.network.auth_pipeline import AuthenticatedRequestPipeline
from launchpad.shared.infrastructure.network.endpoints import Endpoints
from launchpad.shared.infrastructure.network.transport import RequestDescriptor, Response


class RestClient:
    def __init__(self, pipeline: AuthenticatedRequestPipeline):
        self._pipeline = pipeline

    # Authentication
    async def login(self, body: Dict[str, Any]) -> Result[Response]:
        return await self._pipeline.send(RequestDescriptor("POST", Endpoints.LOGIN, body=body))

    # Products
    async def get_products(self) -> Result[Response]:
        return await self._pipeline.send(RequestDescriptor("GET", Endpoints.GET_PRODUCT))

    async def create_product(self, body: Dict[str, Any]) -> Result[Response]:
        return await self._pipeline.send(RequestDescriptor("POST", Endpoints.CREATE_PRODUCT, body=body))

    async def update_product(self, product_id: str, body: Dict[str, Any]) -> Result[Response]:
        return await self._pipeline.send(
            RequestDescriptor("POST", Endpoints.update_product(product_id), body=body)
        )

    async def delete_product(self, product_id: str) -> Result[Response]:
        return await self._pipeline.send(RequestDescriptor("GET", Endpoints.delete_product(product_id)))
