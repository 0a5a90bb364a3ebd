import hmac
import logging
from datetime import datetime
from pathlib import Path

import logfire

from hookforge.domain.hook.model.hook import Hook
from hookforge.domain.hook.model.value import check_flag_file
from hookforge.domain.hook.port.repository import HookRepository
from hookforge.domain.hook.service.token import TokenGenerator
from hookforge.domain.shared.error import (
    FlagFileError,
    HookDisabledError,
    InvalidTokenError,
    ValidationError,
)
from hookforge.domain.shared.service import Service

logger = logging.getLogger(__name__)

FLAG_LINE_TEMPLATE = "Hook triggered at {timestamp}\n"


def validate_hook(hook: Hook) -> None:
    """Check the fields a hook must have before it is stored.

    Token emptiness is not checked here: the API layer generates a token
    when none is supplied, and comparison rejects empty tokens anyway.

    Raises:
        ValidationError: With `field` set to the offending attribute
    """
    if not hook.id:
        raise ValidationError("hook ID is required", field="id")
    if not hook.name:
        raise ValidationError("hook name is required", field="name")
    check_flag_file(hook.flag_file)


class HookService(Service):
    """Business rules for hooks: validation, token checks, and triggering.

    Triggering a hook writes a one-line timestamp to
    ``<flags_dir>/<hook.flag_file>``. Watchers outside this process treat
    the file's existence and timestamp as the signal.
    """

    repo: HookRepository
    flags_dir: Path
    token_generator: TokenGenerator

    def get_hook(self, hook_id: str) -> Hook:
        try:
            return self.repo.get_by_id(hook_id)
        except Exception as e:
            logger.error("Failed to get hook %s: %s", hook_id, e)
            raise

    def get_all_hooks(self) -> list[Hook]:
        try:
            return self.repo.get_all()
        except Exception as e:
            logger.error("Failed to get all hooks: %s", e)
            raise

    def create_hook(self, hook: Hook) -> Hook:
        try:
            validate_hook(hook)
        except ValidationError as e:
            logger.error("Failed to validate hook %s: %s", hook.id, e.message)
            raise

        try:
            created = self.repo.create(hook)
        except Exception as e:
            logger.error("Failed to create hook %s: %s", hook.id, e)
            raise

        logger.info("Hook created: %s", created.id)
        return created

    def update_hook(self, hook: Hook) -> Hook:
        try:
            validate_hook(hook)
        except ValidationError as e:
            logger.error("Failed to validate hook %s: %s", hook.id, e.message)
            raise

        try:
            updated = self.repo.update(hook)
        except Exception as e:
            logger.error("Failed to update hook %s: %s", hook.id, e)
            raise

        logger.info("Hook updated: %s", updated.id)
        return updated

    def delete_hook(self, hook_id: str) -> None:
        try:
            self.repo.delete(hook_id)
        except Exception as e:
            logger.error("Failed to delete hook %s: %s", hook_id, e)
            raise

        logger.info("Hook deleted: %s", hook_id)

    def generate_token(self) -> str:
        return self.token_generator.generate()

    def validate_hook_token(self, hook_id: str, token: str) -> None:
        """Check that `token` authorizes triggering the hook.

        Raises:
            HookNotFoundError: If the hook does not exist
            HookDisabledError: If the hook exists but is disabled
            InvalidTokenError: If the token does not match
        """
        try:
            hook = self.repo.get_by_id(hook_id)
        except Exception as e:
            logger.error("Failed to get hook %s for token validation: %s", hook_id, e)
            raise

        if not hook.enabled:
            logger.warning("Hook is disabled: %s", hook_id)
            raise HookDisabledError(hook_id)

        # Empty stored tokens never match, not even an empty supplied token
        if not hook.token or not hmac.compare_digest(
            hook.token.encode("utf-8"), token.encode("utf-8")
        ):
            logger.warning("Invalid token for hook %s", hook_id)
            logfire.warn("Invalid hook token", hook_id=hook_id)
            raise InvalidTokenError(hook_id)

    def trigger_hook(self, hook_id: str, token: str, client_ip: str | None = None) -> Path:
        """Authorize the caller and write the hook's flag file.

        Returns:
            Path of the flag file that was written

        Raises:
            HookNotFoundError, HookDisabledError, InvalidTokenError: See validate_hook_token
            ValidationError: If the stored flag file path is unsafe
            FlagFileError: If the flag file cannot be written
        """
        with logfire.span("TriggerHook", hook_id=hook_id, client_ip=client_ip):
            self.validate_hook_token(hook_id, token)

            hook = self.repo.get_by_id(hook_id)

            try:
                flag_path = self._create_flag_file(hook)
            except (ValidationError, FlagFileError) as e:
                logger.error(
                    "Failed to create flag file %s for hook %s: %s",
                    hook.flag_file,
                    hook_id,
                    e.message,
                )
                raise

            logger.info(
                "Hook triggered: %s (flag_file=%s, ip=%s)", hook_id, hook.flag_file, client_ip
            )
            logfire.info(
                "Hook triggered", hook_id=hook_id, flag_file=hook.flag_file, client_ip=client_ip
            )
            return flag_path

    def _create_flag_file(self, hook: Hook) -> Path:
        # Checked again here: the store file may have been edited by hand
        check_flag_file(hook.flag_file)

        flags_root = Path(self.flags_dir)
        target = flags_root / hook.flag_file

        # Symlinks inside the flags root must not lead outside it
        if not target.resolve().is_relative_to(flags_root.resolve()):
            raise ValidationError(
                f"flag file path escapes the flags directory: {hook.flag_file}",
                field="flag_file",
            )

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FlagFileError(f"failed to create directory: {e}") from e

        timestamp = datetime.now().astimezone().isoformat(timespec="seconds")
        try:
            with open(target, "w", encoding="utf-8") as f:
                f.write(FLAG_LINE_TEMPLATE.format(timestamp=timestamp))
        except OSError as e:
            raise FlagFileError(f"failed to write flag file: {e}") from e

        return target
