import asyncio
import logging
import os

from aiogram import Bot, Dispatcher
from aiogram.webhook.aiohttp_server import SimpleRequestHandler, setup_application
from aiohttp import web

from app.config import BotConfig, load_config
from app.handlers import create_router
from app.sessions import SessionStore


ALLOWED_UPDATES = ["message"]


def create_dispatcher(config: BotConfig, sessions: SessionStore | None = None) -> Dispatcher:
    # config и sessions попадают в хендлеры как аргументы
    dp = Dispatcher(config=config, sessions=sessions if sessions is not None else SessionStore())
    dp.include_router(create_router())
    return dp


async def health(request: web.Request) -> web.Response:
    config: BotConfig = request.app["config"]
    return web.Response(text=f"OK {config.brand_name} warranty bot")


def create_app(config: BotConfig) -> web.Application:
    app = web.Application()
    app["config"] = config
    app.router.add_get("/", health)
    return app


async def on_webhook_startup(bot: Bot, config: BotConfig) -> None:
    await bot.set_webhook(
        config.webhook_url,
        secret_token=config.webhook_secret or None,
        allowed_updates=ALLOWED_UPDATES,
        drop_pending_updates=True,
    )
    logging.info(f"Webhook set on {config.public_url.rstrip('/')}/webhook/***")


async def on_webhook_shutdown(bot: Bot) -> None:
    try:
        await bot.delete_webhook()
    except Exception as e:
        logging.warning(f"deleteWebhook warning: {e}")


def setup_webhook(app: web.Application, dp: Dispatcher, bot: Bot, config: BotConfig) -> None:
    dp.startup.register(on_webhook_startup)
    dp.shutdown.register(on_webhook_shutdown)
    SimpleRequestHandler(
        dispatcher=dp,
        bot=bot,
        secret_token=config.webhook_secret or None,
    ).register(app, path=config.webhook_path)
    setup_application(app, dp, bot=bot)


async def run_webhook(config: BotConfig, dp: Dispatcher, bot: Bot) -> None:
    app = create_app(config)
    setup_webhook(app, dp, bot, config)
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "0.0.0.0", config.port)
    await site.start()
    logging.info(f"Server listening on {config.port}")
    try:
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()


async def run_polling(config: BotConfig, dp: Dispatcher, bot: Bot) -> None:
    # HTTP остаётся ради health-check хостинга
    runner = web.AppRunner(create_app(config))
    await runner.setup()
    site = web.TCPSite(runner, "0.0.0.0", config.port)
    await site.start()
    logging.info(f"Server listening on {config.port}")

    try:
        # Сбрасываем вебхук и висящие апдейты, чтобы избежать 409
        await bot.delete_webhook(drop_pending_updates=True)
    except Exception as e:
        logging.warning(f"deleteWebhook warning: {e}")

    try:
        logging.info("Bot started")
        await dp.start_polling(bot, allowed_updates=ALLOWED_UPDATES)
    finally:
        await runner.cleanup()


async def run_bot() -> None:
    config = load_config()
    dp = create_dispatcher(config)
    bot = Bot(config.token)
    if config.public_url:
        await run_webhook(config, dp, bot)
    else:
        await run_polling(config, dp, bot)


if __name__ == "__main__":
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    asyncio.run(run_bot())
