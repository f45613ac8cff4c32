"""Main Telegram bot module."""
import html
import logging
from typing import Dict, List

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import CallbackContext

from vocabot.exceptions import InvalidStateError, ParseError, ValidationError
from vocabot.models.training_models import Assessment, CardRequest, SessionState
from vocabot.models.word_models import LearningResult, WordEntry, WordPool
from vocabot.services.learning_service import LearningService
from vocabot.services.word_service import WordService
from vocabot import monitoring

# Get logger for this module
logger = logging.getLogger(__name__)

# Conversation states
MAIN_MENU, IMPORTING, LEARNING = range(3)

MENU = "🏠 Menu"
START_LEARNING = "💡 Start Learning"
IMPORT_WORDS = "📝 Import Words"
CLEAR_WORDS = "🗑️ Clear Words"
RESTART = "🔁 Restart"

LEARN_PREFIX = "learn_"
LEARN_REVEAL = "learn_reveal"
LEARN_FINISH = "learn_finish"
LEARN_RESTART = "learn_restart"

IMPORT_EXAMPLE = (
    '[{"word": "serendipity", "part_of_speech": "n.", '
    '"explanation": ["finding something good without looking for it"]}]'
)


def msg_back_to(text: str) -> str: return f"🔙 {text}"


KB_BACK_TO_MENU = [[InlineKeyboardButton(msg_back_to(MENU), callback_data="back_to_menu")]]


async def log_received(update: Update, context_type: str) -> None:
    """Log message."""
    txt = ""
    if context_type == "start": txt = ""
    elif update.callback_query: txt = f" {update.callback_query.data}"
    elif update.message: txt = f" {(update.message.text or '')[:50]}"
    logger.info(f"Received @{context_type:8} from user {update.effective_user.username} ({update.effective_user.id}){txt}")


def get_pool(context: CallbackContext) -> WordPool:
    """Get the word pool of the chat, creating an empty one."""
    if "pool" not in context.chat_data:
        context.chat_data["pool"] = WordPool()
    return context.chat_data["pool"]


def get_learning_service(context: CallbackContext) -> LearningService:
    """Get the learning service bound to the chat's word pool."""
    service = context.chat_data.get("learning_service")
    pool = get_pool(context)
    if service is None or service.pool is not pool:
        service = LearningService(pool)
        context.chat_data["learning_service"] = service
    return service


def build_card(entry: WordEntry, revealed: bool = False) -> CardRequest:
    """Build the front or the back of a flashcard."""
    message = f"<b>{html.escape(entry.word)}</b> <i>{html.escape(entry.part_of_speech)}</i>"
    if not revealed:
        buttons = [
            [{"text": "👀 Show answer", "callback_data": LEARN_REVEAL}],
            [{"text": "🏁 Finish", "callback_data": LEARN_FINISH}],
        ]
        return CardRequest(word=entry, message=message, buttons=buttons)

    message += "\n\n" + "\n".join(
        f"{number}. {html.escape(explanation)}"
        for number, explanation in enumerate(entry.explanations, start=1)
    )
    buttons = [
        [{"text": "❌ Don't know", "callback_data": f"{LEARN_PREFIX}{Assessment.UNKNOWN.value}"},
         {"text": "🤔 Vague", "callback_data": f"{LEARN_PREFIX}{Assessment.VAGUE.value}"},
         {"text": "✅ Know it", "callback_data": f"{LEARN_PREFIX}{Assessment.KNOWN.value}"}],
        [{"text": "🏁 Finish", "callback_data": LEARN_FINISH}],
    ]
    return CardRequest(word=entry, message=message, buttons=buttons, revealed=True)


def format_results(results: List[LearningResult]) -> str:
    """Render session results as a table, most unfamiliar words first."""
    if not results:
        return "No words were practiced in this session."

    width = max(len("Word"), *(len(result.word) for result in results))
    lines = [f"{'#':>3} {'Word':<{width}} {'Unfam.':>7} {'Seen':>4}"]
    for rank, result in enumerate(results, start=1):
        lines.append(
            f"{rank:>3} {result.word:<{width}} {result.unfamiliarity:>7.2f} {result.occurrences:>4}"
        )
    return "📊 Results\n\n<pre>" + html.escape("\n".join(lines)) + "</pre>"


async def send_card(update: Update, card: CardRequest) -> None:
    """Send a card to the user."""

    def prepare_buttons(buttons: List[List[Dict[str, str]]]) -> List[List[InlineKeyboardButton]]:
        return [
            [InlineKeyboardButton(button["text"], callback_data=button["callback_data"]) for button in row]
            for row in buttons
        ]

    reply_markup = InlineKeyboardMarkup(prepare_buttons(card.buttons))
    if update.callback_query:
        await update.callback_query.edit_message_text(card.message, reply_markup=reply_markup, parse_mode="HTML")
    else:
        await update.message.reply_text(card.message, reply_markup=reply_markup, parse_mode="HTML")


async def show_results(update: Update, results: List[LearningResult]) -> int:
    """Show the results table with restart and menu buttons."""
    await update.callback_query.edit_message_text(
        format_results(results),
        reply_markup=InlineKeyboardMarkup([
            [InlineKeyboardButton(msg_back_to(MENU), callback_data="back_to_menu"),
             InlineKeyboardButton(RESTART, callback_data=LEARN_RESTART)],
        ]),
        parse_mode="HTML",
    )
    return MAIN_MENU


async def handle_start(update: Update, context: CallbackContext) -> int:
    """Start the conversation and show main menu."""
    await log_received(update, "start")

    pool = get_pool(context)
    keyboard = [
        [InlineKeyboardButton(START_LEARNING, callback_data="start_learning")],
        [InlineKeyboardButton(IMPORT_WORDS, callback_data="import_words")],
    ]
    if len(pool):
        keyboard.append([InlineKeyboardButton(CLEAR_WORDS, callback_data="clear_words")])
    reply_markup = InlineKeyboardMarkup(keyboard)

    message = (f"Welcome to VocaBot, {update.effective_user.first_name}! 👋\n\n"
               f"Your word list has {len(pool)} word{'s' if len(pool) != 1 else ''}.\n"
               "What would you like to do?")

    # Handle both initial command and callback queries
    if update.callback_query:
        await update.callback_query.edit_message_text(message, reply_markup=reply_markup)
    else:
        await update.message.reply_text(message, reply_markup=reply_markup)

    return MAIN_MENU


async def handle_callback(update: Update, context: CallbackContext) -> int:
    """Handle callback queries from inline keyboard."""
    query = update.callback_query
    await query.answer()

    await log_received(update, "callback")

    if query.data == "start_learning":
        return await start_learning(update, context)
    elif query.data.startswith(LEARN_PREFIX):
        return await handle_learning_response(update, context)
    elif query.data == "back_to_menu":
        return await handle_start(update, context)
    elif query.data == "import_words":
        return await import_words(update, context)
    elif query.data == "clear_words":
        return await clear_words(update, context)

    return MAIN_MENU


async def handle_message(update: Update, context: CallbackContext) -> int:
    """Handle messages."""
    await log_received(update, "message")

    await update.message.reply_text("Please start with /start")

    return MAIN_MENU


async def import_words(update: Update, context: CallbackContext) -> int:
    """Ask the user for a word list."""
    await update.callback_query.edit_message_text(
        "📝 Please send your words as a JSON array, for example:\n\n"
        f"<code>{html.escape(IMPORT_EXAMPLE)}</code>",
        reply_markup=InlineKeyboardMarkup([
            [InlineKeyboardButton(msg_back_to(MENU), callback_data="back_to_menu"),
             InlineKeyboardButton(START_LEARNING, callback_data="start_learning")],
        ]),
        parse_mode="HTML",
    )
    return IMPORTING


async def handle_import_words(update: Update, context: CallbackContext) -> int:
    """Handle a word list sent by the user."""
    await log_received(update, "import")

    word_service = WordService(get_pool(context))
    try:
        added_words = word_service.import_json(update.message.text or "")
    except ParseError as e:
        await update.message.reply_text(
            f"⚠️ Could not read the word list: {e}\n\nPlease fix it and send it again.",
            reply_markup=InlineKeyboardMarkup(KB_BACK_TO_MENU),
        )
        return IMPORTING
    except ValidationError as e:
        await update.message.reply_text(
            f"⚠️ {e}\n\nNothing was imported. Please fix it and send it again.",
            reply_markup=InlineKeyboardMarkup(KB_BACK_TO_MENU),
        )
        return IMPORTING

    added_words_count = len(added_words)
    if added_words_count == 0: message = "Nothing to add.\n"
    else: message = f"Successfully added {added_words_count} word{'s' if added_words_count > 1 else ''}!\n"
    message += f"Your word list has {len(word_service.pool)} words.\n\nYou can send more words or start learning."

    await update.message.reply_text(
        message,
        reply_markup=InlineKeyboardMarkup([
            [InlineKeyboardButton(msg_back_to(MENU), callback_data="back_to_menu"),
             InlineKeyboardButton(START_LEARNING, callback_data="start_learning")],
        ]),
    )
    return IMPORTING


async def clear_words(update: Update, context: CallbackContext) -> int:
    """Remove all words of the chat."""
    WordService(get_pool(context)).clear()
    context.chat_data.pop("learning_service", None)
    return await handle_start(update, context)


async def start_learning(update: Update, context: CallbackContext) -> int:
    """Start a new learning session."""
    learning_service = get_learning_service(context)
    pool = learning_service.pool

    # Words already practiced or mastered start over from scratch
    if any(entry.occurrences for entry in pool) or not learning_service.get_eligible_indices():
        entry = learning_service.restart()
    else:
        entry = learning_service.start_session()

    if entry is None:
        await update.callback_query.edit_message_text(
            "No words available for learning.\n"
            "Import some words first!",
            reply_markup=InlineKeyboardMarkup([
                [InlineKeyboardButton(msg_back_to(MENU), callback_data="back_to_menu"),
                 InlineKeyboardButton(IMPORT_WORDS, callback_data="import_words")],
            ]),
        )
        return MAIN_MENU

    await send_card(update, build_card(entry))
    return LEARNING


async def handle_learning_response(update: Update, context: CallbackContext) -> int:
    """Handle card flips and self-assessments during learning."""
    data = update.callback_query.data
    learning_service = get_learning_service(context)

    try:
        if data == LEARN_RESTART:
            entry = learning_service.restart()
        elif data == LEARN_FINISH:
            return await show_results(update, learning_service.end_early())
        elif data == LEARN_REVEAL:
            entry = learning_service.get_current_word()
            if entry is None:
                raise InvalidStateError("No word is shown")
            await send_card(update, build_card(entry, revealed=True))
            return LEARNING
        else:
            entry = learning_service.assess(data[len(LEARN_PREFIX):])
    except (InvalidStateError, ValueError) as e:
        logger.warning(f"Ignoring learning response {data}: {e}")
        monitoring.error_count.labels(error_type="state").inc()
        await update.callback_query.edit_message_text(
            "This session is over. Start a new one from the menu.",
            reply_markup=InlineKeyboardMarkup(KB_BACK_TO_MENU),
        )
        return MAIN_MENU

    if learning_service.state == SessionState.FINISHED:
        return await show_results(update, learning_service.get_results())

    await send_card(update, build_card(entry))
    return LEARNING
