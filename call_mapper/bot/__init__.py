from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from call_mapper.bot.handlers import router as handlers_router
from call_mapper.core.config import load_settings
from call_mapper.services.rate_limit import rate_limiter

settings = load_settings()
rate_limiter.configure(settings.rate_limit_calls, settings.rate_limit_period)

bot = Bot(token=settings.bot_token, default=DefaultBotProperties(parse_mode=ParseMode.HTML))

dp = Dispatcher(default_calls_per_person=settings.default_calls_per_person)
dp.include_router(handlers_router)
