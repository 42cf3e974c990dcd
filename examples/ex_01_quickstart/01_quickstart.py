"""Quickstart: explicit registrations and annotation wiring.

Register each contract with the factory that builds it and the contracts
it depends on, then resolve only the top-level service.
"""

from __future__ import annotations

from scopewire import Container, Lifetime


class Database:
    def __init__(self) -> None:
        self.host = "localhost"


class UserRepository:
    def __init__(self, database: Database) -> None:
        self.database = database


class UserService:
    def __init__(self, repository: UserRepository) -> None:
        self.repository = repository


def main() -> None:
    container = Container()
    container.register(Database, Database, lifetime=Lifetime.SINGLETON)
    container.register(UserRepository, UserRepository, [Database])
    container.add_concrete(UserService)

    service = container.resolve(UserService)
    print(f"db_host={service.repository.database.host}")  # => db_host=localhost

    chain = (
        f"{type(service).__name__}"
        f">{type(service.repository).__name__}"
        f">{type(service.repository.database).__name__}"
    )
    print(f"chain={chain}")  # => chain=UserService>UserRepository>Database

    container.register("greeting", lambda service: f"hello from {service.repository.database.host}", [UserService])
    print(container.resolve("greeting"))  # => hello from localhost


if __name__ == "__main__":
    main()
