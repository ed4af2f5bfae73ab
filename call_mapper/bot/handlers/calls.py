from __future__ import annotations

import html

from aiogram import Router, types
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command, CommandObject
from aiogram.fsm.context import FSMContext
from aiogram.types import BufferedInputFile

from call_mapper.bot.keyboards import EXPORT, REGENERATE, result_keyboard
from call_mapper.bot.utils import GENERIC_ERROR, SLOW_DOWN, check_rate_limit, log_handler_exception
from call_mapper.services import call_flow
from call_mapper.services.assignment import AssignmentResult
from call_mapper.services.feasibility import max_calls_per_person
from call_mapper.services.report import format_report, format_text_export

router = Router()

CALLS_USAGE = "Usage: /calls [calls per person] Bill, Bob, Chris, Dave, Ed"
EXPORT_FILENAME = "call_assignments.txt"
STALE_MESSAGE = "This message is too old to update. Send /calls again."


def render_result(result: AssignmentResult) -> str:
    if not result.ok:
        return html.escape(result.error)

    lines = [
        f"<b>Call Assignments</b> ({result.calls_per_person} per person)",
        f"<pre>{html.escape(format_report(result.assignments))}</pre>",
    ]
    if result.note:
        lines.append(html.escape(result.note))
    lines.append("Randomized each time you press \"Shuffle again\".")
    return "\n".join(lines)


def _reply_markup(result: AssignmentResult):
    return result_keyboard() if result.assignments else None


@router.message(Command("calls"))
async def calls_command_handler(
    message: types.Message,
    command: CommandObject,
    state: FSMContext,
    default_calls_per_person: int,
) -> None:
    if not check_rate_limit(message.from_user.id, "calls"):
        await message.answer(SLOW_DOWN)
        return

    try:
        requested, names = call_flow.parse_calls_request(command.args or "")
        if not names:
            await message.answer(CALLS_USAGE)
            return

        duplicates = call_flow.find_duplicates(names)
        if duplicates:
            await message.answer(
                "Each name must be unique. Repeated: "
                + ", ".join(html.escape(name) for name in duplicates)
            )
            return

        calls = call_flow.resolve_calls_per_person(len(names), requested, default_calls_per_person)
        result = call_flow.plan_calls(names, calls)
        await state.update_data(names=names, calls=calls, assignments=result.assignments)
        await message.answer(render_result(result), reply_markup=_reply_markup(result))
    except Exception as exc:
        log_handler_exception("calls", message.from_user.id, message.chat.id, exc)
        await message.answer(GENERIC_ERROR)


@router.message(Command("max"))
async def max_command_handler(message: types.Message, command: CommandObject) -> None:
    if not check_rate_limit(message.from_user.id, "max"):
        await message.answer(SLOW_DOWN)
        return

    names = call_flow.parse_names(command.args or "")
    if len(names) < 2:
        await message.answer("Usage: /max Bill, Bob, Chris (at least two names)")
        return

    await message.answer(
        f"With {len(names)} participants, each person can make at most "
        f"{max_calls_per_person(len(names))} calls."
    )


@router.callback_query(lambda c: c.data == REGENERATE)
async def regenerate_callback_handler(query: types.CallbackQuery, state: FSMContext) -> None:
    if not check_rate_limit(query.from_user.id, "regenerate"):
        await query.answer(SLOW_DOWN, show_alert=True)
        return

    if not isinstance(query.message, types.Message):
        await query.answer(STALE_MESSAGE, show_alert=True)
        return

    data = await state.get_data()
    if not data.get("names"):
        await query.answer("Nothing to shuffle yet. Send /calls first.", show_alert=True)
        return

    try:
        result = call_flow.plan_calls(data["names"], data["calls"])
        await state.update_data(assignments=result.assignments)
        try:
            await query.message.edit_text(render_result(result), reply_markup=_reply_markup(result))
        except TelegramBadRequest:
            await query.answer("No other arrangement is possible for this group.", show_alert=True)
            return
        await query.answer()
    except Exception as exc:
        log_handler_exception("regenerate", query.from_user.id, query.message.chat.id, exc)
        await query.answer(GENERIC_ERROR, show_alert=True)


@router.callback_query(lambda c: c.data == EXPORT)
async def export_callback_handler(query: types.CallbackQuery, state: FSMContext) -> None:
    if not check_rate_limit(query.from_user.id, "export"):
        await query.answer(SLOW_DOWN, show_alert=True)
        return

    if not isinstance(query.message, types.Message):
        await query.answer(STALE_MESSAGE, show_alert=True)
        return

    data = await state.get_data()
    assignments = data.get("assignments")
    if not assignments:
        await query.answer("There is nothing to export yet. Send /calls first.", show_alert=True)
        return

    try:
        document = BufferedInputFile(
            format_text_export(assignments).encode("utf-8"),
            filename=EXPORT_FILENAME,
        )
        await query.message.answer_document(document)
        await query.answer()
    except Exception as exc:
        log_handler_exception("export", query.from_user.id, query.message.chat.id, exc)
        await query.answer(GENERIC_ERROR, show_alert=True)
