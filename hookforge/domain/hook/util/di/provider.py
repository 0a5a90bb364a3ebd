from dishka import Provider, Scope, provide

from hookforge.config import Config
from hookforge.domain.hook.port.repository import HookRepository
from hookforge.domain.hook.service.hook import HookService
from hookforge.domain.hook.service.token import TokenGenerator


class HookProvider(Provider):
    @provide(scope=Scope.APP)
    def get_token_generator(self) -> TokenGenerator:
        return TokenGenerator()

    @provide(scope=Scope.APP)
    def get_hook_service(
        self,
        repo: HookRepository,
        token_generator: TokenGenerator,
        config: Config,
    ) -> HookService:
        return HookService(
            repo=repo,
            flags_dir=config.hooks.flags_dir,
            token_generator=token_generator,
        )
