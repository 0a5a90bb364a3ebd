from hookforge.domain.hook.model.hook import Hook

__all__ = ["Hook"]
