from aiogram import Router

from call_mapper.bot.handlers import calls, start

router = Router()
router.include_router(start.router)
router.include_router(calls.router)
