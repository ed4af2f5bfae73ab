from aiogram import Router, types
from aiogram.filters import Command, CommandStart

from call_mapper.bot.utils import GENERIC_ERROR, SLOW_DOWN, check_rate_limit, log_handler_exception

router = Router()

HELP_TEXT = (
    "<b>How the algorithm works</b>\n\n"
    "<b>Goal</b>\n"
    "Each person calls exactly the requested number of people, and no call is "
    "reciprocal: if Bill calls Bob, Bob does not call Bill.\n\n"
    "<b>Steps</b>\n"
    "1. Validation: check that the configuration is mathematically possible.\n"
    "2. Randomization: a fresh random seed is drawn for every generation.\n"
    "3. Assignment: calls are handed out while skipping anyone who would create a reciprocal pair.\n"
    "4. Balance check: nobody is called by many more people than anyone else.\n"
    "5. Verification: every constraint is checked before the result is shown.\n\n"
    "<b>Randomization</b>\n"
    "Press \"Shuffle again\" for a different valid assignment of the same group.\n\n"
    "<b>Errors</b>\n"
    "Impossible configurations, like 5 calls per person with 11 people, are rejected "
    "with the limit that was exceeded. Use /max to see the limit for your group."
)


@router.message(CommandStart())
async def command_start_handler(message: types.Message) -> None:
    if not check_rate_limit(message.from_user.id, "start"):
        await message.answer(SLOW_DOWN)
        return

    try:
        await message.answer(
            "Hello! I map out who calls whom in a group.\n\n"
            "Send /calls followed by comma-separated names, optionally starting with the "
            "number of calls per person, e.g.\n"
            "/calls 2 Bill, Bob, Chris, Dave, Ed\n\n"
            "Use /max to see how many calls per person a group allows, "
            "and /help to learn how the assignments are made."
        )
    except Exception as exc:
        log_handler_exception("start", message.from_user.id, message.chat.id, exc)
        await message.answer(GENERIC_ERROR)


@router.message(Command("help"))
async def help_command_handler(message: types.Message) -> None:
    if not check_rate_limit(message.from_user.id, "help"):
        await message.answer(SLOW_DOWN)
        return

    try:
        await message.answer(HELP_TEXT)
    except Exception as exc:
        log_handler_exception("help", message.from_user.id, message.chat.id, exc)
        await message.answer(GENERIC_ERROR)
