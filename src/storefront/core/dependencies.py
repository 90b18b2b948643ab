from typing import TypeVar, Type, Dict, Any, Callable

from flask import current_app

T = TypeVar('T')

EXTENSION_KEY = "storefront.container"


class DependencyContainer:
    """Simple dependency injection container, one per application"""

    def __init__(self):
        self._services: Dict[str, Any] = {}
        self._factories: Dict[str, Callable] = {}

    def register_singleton(self, service_class: Type[T], instance: T) -> None:
        """Register a singleton instance"""
        key = self._get_service_key(service_class)
        self._services[key] = instance

    def register_factory(self, service_class: Type[T], factory: Callable[[], T]) -> None:
        """Register a factory function for creating instances"""
        key = self._get_service_key(service_class)
        self._factories[key] = factory

    def get(self, service_class: Type[T]) -> T:
        """Get service instance"""
        key = self._get_service_key(service_class)

        # Check if singleton exists
        if key in self._services:
            return self._services[key]

        # Check if factory exists
        if key in self._factories:
            instance = self._factories[key]()
            # Cache as singleton
            self._services[key] = instance
            return instance

        raise ValueError(f"Service {service_class.__name__} not registered")

    def _get_service_key(self, service_class: Type[T]) -> str:
        """Get unique key for service class"""
        return f"{service_class.__module__}.{service_class.__qualname__}"


def get_container() -> DependencyContainer:
    """Get the dependency container of the active Flask application"""
    return current_app.extensions[EXTENSION_KEY]


def get_service(service_class: Type[T]) -> T:
    return get_container().get(service_class)


def build_container(config, db=None) -> DependencyContainer:
    """
    Wire storage, repositories and services for one application.

    Repositories receive the Database handle, services receive repositories;
    nothing reaches for a module-level singleton.
    """
    from storefront.core.security import PasswordHasher, TokenService
    from storefront.db.database import Database
    from storefront.repositories import (
        CartRepository, CategoryRepository, OrderRepository, ProductRepository, UserRepository
    )
    from storefront.services import (
        CartService, CategoryService, OrderService, ProductService, UserService
    )

    container = DependencyContainer()
    db = db or Database(config.database)
    container.register_singleton(Database, db)

    container.register_factory(CartRepository, lambda: CartRepository(db))
    container.register_factory(CategoryRepository, lambda: CategoryRepository(db))
    container.register_factory(OrderRepository, lambda: OrderRepository(db))
    container.register_factory(ProductRepository, lambda: ProductRepository(db))
    container.register_factory(UserRepository, lambda: UserRepository(db))

    container.register_factory(
        PasswordHasher, lambda: PasswordHasher(config.security.password_hash_rounds)
    )
    container.register_factory(TokenService, lambda: TokenService(config.security))

    container.register_factory(
        UserService,
        lambda: UserService(
            container.get(UserRepository),
            container.get(PasswordHasher),
            container.get(TokenService),
        ),
    )
    container.register_factory(
        CategoryService, lambda: CategoryService(container.get(CategoryRepository))
    )
    container.register_factory(
        ProductService,
        lambda: ProductService(
            container.get(ProductRepository),
            container.get(CategoryRepository),
            max_page_size=config.api.max_page_size,
        ),
    )
    container.register_factory(
        CartService,
        lambda: CartService(container.get(CartRepository), container.get(ProductRepository)),
    )
    container.register_factory(
        OrderService,
        lambda: OrderService(
            db,
            container.get(OrderRepository),
            container.get(ProductRepository),
            container.get(CartService),
            cart_clear_attempts=config.api.cart_clear_attempts,
        ),
    )
    return container
