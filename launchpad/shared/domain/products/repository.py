"""Product CRUD repository with a local cache of the last fetched list."""

from __future__ import annotations

import logging
from typing import List

from launchpad.shared.core.failures import FailureType, RequestFailure
from launchpad.shared.core.result import RequestFailureError, Result, async_guard, unwrap
from launchpad.shared.domain.entities import ProductEntity
from launchpad.shared.infrastructure.network.rest_client import RestClient

logger = logging.getLogger(__name__)


class ProductRepository:
    def __init__(self, client: RestClient):
        self._client = client
        self._products: List[ProductEntity] = []

    @property
    def all_products(self) -> List[ProductEntity]:
        return list(self._products)

    async def get_products(self) -> Result[List[ProductEntity]]:
        async def operation() -> List[ProductEntity]:
            response = unwrap(await self._client.get_products())
            raw = response.body.get("data") if isinstance(response.body, dict) else None
            if isinstance(raw, list):
                self._products = [ProductEntity.model_validate(item) for item in raw]
            logger.debug(f"Loaded {len(self._products)} products")
            return self.all_products

        return await async_guard(operation)

    async def delete_product(self, product_id: str) -> Result[None]:
        async def operation() -> None:
            unwrap(await self._client.delete_product(product_id))
            self._products = [p for p in self._products if p.id != product_id]

        return await async_guard(operation)

    async def create_product(self, product: ProductEntity) -> Result[ProductEntity]:
        async def operation() -> ProductEntity:
            unwrap(await self._client.create_product(product.to_wire()))
            return product

        return await async_guard(operation)

    async def update_product(self, product_id: str, product: ProductEntity) -> Result[ProductEntity]:
        """Update a product, then reload the cached list."""
        async def operation() -> ProductEntity:
            if not product_id:
                raise RequestFailureError(RequestFailure(FailureType.VALIDATION, "Product id is required"))
            unwrap(await self._client.update_product(product_id, product.to_wire()))
            refreshed = await self.get_products()
            if not refreshed.is_success:
                logger.warning(f"Product {product_id} updated but list reload failed: {refreshed.failure.message}")
            return product

        return await async_guard(operation)
