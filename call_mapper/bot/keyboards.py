from aiogram.utils.keyboard import InlineKeyboardBuilder

REGENERATE = "regenerate"
EXPORT = "export"


def result_keyboard():
    keyboard = InlineKeyboardBuilder()
    keyboard.button(text="Shuffle again", callback_data=REGENERATE)
    keyboard.button(text="Export as text", callback_data=EXPORT)
    keyboard.adjust(2)
    return keyboard.as_markup()
