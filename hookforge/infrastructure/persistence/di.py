from dishka import Provider, Scope, from_context, provide

from hookforge.config import Config
from hookforge.domain.hook.port.repository import HookRepository
from hookforge.infrastructure.persistence.repository.hook import JsonHookRepository


class PersistenceProvider(Provider):
    config = from_context(provides=Config, scope=Scope.APP)

    @provide(scope=Scope.APP)
    def get_hook_repository(self, config: Config) -> HookRepository:
        # Loads the store file; a broken file fails container resolution at startup
        return JsonHookRepository(config.hooks.storage_path)
