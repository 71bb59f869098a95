"""Use cases: the single entry points the UI calls into the domain."""

from __future__ import annotations

from typing import List

from pydantic import ValidationError

from launchpad.shared.core.failures import FailureType, RequestFailure
from launchpad.shared.core.result import Error, Result
from launchpad.shared.domain.authentication.repository import AuthenticationRepository
from launchpad.shared.domain.entities import LoginRequest, LoginResponse, ProductEntity
from launchpad.shared.domain.locale.repository import LocaleRepository
from launchpad.shared.domain.products.repository import ProductRepository


class LoginUseCase:
    def __init__(self, repository: AuthenticationRepository):
        self.repository = repository

    async def __call__(self, email: str, password: str, remember_me: bool = False) -> Result[LoginResponse]:
        try:
            request = LoginRequest(email=email, password=password)
        except ValidationError:
            return Error(RequestFailure(FailureType.VALIDATION, "Email and password are required"))
        return await self.repository.login(request, remember_me)


class LogoutUseCase:
    def __init__(self, repository: AuthenticationRepository):
        self.repository = repository

    async def __call__(self) -> Result[None]:
        return await self.repository.logout()


class CheckRememberMeUseCase:
    def __init__(self, repository: AuthenticationRepository):
        self.repository = repository

    def __call__(self) -> bool:
        return self.repository.check_remember_me()


class SaveRememberMeUseCase:
    def __init__(self, repository: AuthenticationRepository):
        self.repository = repository

    def __call__(self, value: bool) -> None:
        self.repository.save_remember_me(value)


class GetCurrentLocaleUseCase:
    def __init__(self, repository: LocaleRepository):
        self.repository = repository

    def __call__(self) -> str:
        return self.repository.get_current_locale()


class SetCurrentLocaleUseCase:
    def __init__(self, repository: LocaleRepository):
        self.repository = repository

    def __call__(self, language: str) -> None:
        self.repository.set_current_locale(language)


class GetProductUseCase:
    def __init__(self, repository: ProductRepository):
        self.repository = repository

    async def __call__(self) -> Result[List[ProductEntity]]:
        return await self.repository.get_products()


class CreateProductUseCase:
    def __init__(self, repository: ProductRepository):
        self.repository = repository

    async def __call__(self, product: ProductEntity) -> Result[ProductEntity]:
        return await self.repository.create_product(product)


class UpdateProductUseCase:
    def __init__(self, repository: ProductRepository):
        self.repository = repository

    async def __call__(self, product_id: str, product: ProductEntity) -> Result[ProductEntity]:
        return await self.repository.update_product(product_id, product)


class DeleteProductUseCase:
    def __init__(self, repository: ProductRepository):
        self.repository = repository

    async def __call__(self, product_id: str) -> Result[None]:
        return await self.repository.delete_product(product_id)
