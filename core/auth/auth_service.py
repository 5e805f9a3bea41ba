from typing import Union
from core.auth.context import AuthContext
from core.auth.models import Auth, Failure
from core.interfaces.auth_strategy import AuthStrategy
from utils.logger import logger


class AuthService:
    """Runs a strategy through the request and callback phases"""

    def request_phase(self, strategy: AuthStrategy, ctx: AuthContext) -> str:
        """Return the provider URL the user must be redirected to"""
        strategy.handle_request(ctx)
        logger.info(f"Redirecting to {strategy.name} for authorization")
        return ctx.redirect_to

    async def callback_phase(
        self,
        strategy: AuthStrategy,
        provider_name: str,
        ctx: AuthContext
    ) -> Union[Auth, Failure]:
        """
        Handle the provider callback and build the result.

        The strategy's cleanup always runs, including when the callback
        raises.
        """
        try:
            logger.info(f"Handling {provider_name} callback")
            await strategy.handle_callback(ctx)

            if ctx.failed:
                keys = ", ".join(str(e.key) for e in ctx.errors)
                logger.warning(f"{provider_name} authentication failed: {keys}")
                return Failure(provider=provider_name, strategy=strategy.name, errors=list(ctx.errors))

            auth = Auth(
                provider=provider_name,
                strategy=strategy.name,
                uid=strategy.uid(ctx),
                credentials=strategy.credentials(ctx),
                info=strategy.info(ctx),
                extra=strategy.extra(ctx),
            )
            logger.info(f"Authenticated {provider_name} user")
            return auth

        except Exception as e:
            logger.error(f"{provider_name} callback raised: {e}")
            raise
        finally:
            strategy.handle_cleanup(ctx)
