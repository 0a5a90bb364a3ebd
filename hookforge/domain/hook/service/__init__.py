from hookforge.domain.hook.service.hook import HookService
from hookforge.domain.hook.service.token import TokenGenerator

__all__ = ["HookService", "TokenGenerator"]
