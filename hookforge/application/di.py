from dishka import AsyncContainer, make_async_container

from hookforge.config import Config
from hookforge.domain.hook.util.di import HookProvider
from hookforge.infrastructure.persistence import PersistenceProvider


def create_container(config: Config | None = None) -> AsyncContainer:
    # Pydantic Settings populates from env vars and the YAML file at runtime
    config = config or Config()

    return make_async_container(
        PersistenceProvider(),
        HookProvider(),
        context={Config: config},
    )
