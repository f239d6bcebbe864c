from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from zoneinfo import ZoneInfo

from telegram import Update
from telegram.ext import CallbackContext, CommandHandler

from birthday_tracker.cards import (
    build_card,
    member_count_text,
    render_card,
    render_group_listing,
    render_people_listing,
)
from birthday_tracker.config_store import load_config
from birthday_tracker.date_logic import sort_by_upcoming_birthday
from birthday_tracker.models import AppConfig
from birthday_tracker.roster import find_group, groups_for_person, members_of_group, people_in_shared_groups
from birthday_tracker.settings import Settings

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class HandlerDependencies:
    settings: Settings


def is_authorized(update: Update, settings: Settings) -> bool:
    effective_user = update.effective_user
    effective_chat = update.effective_chat
    if effective_user is None or effective_chat is None:
        return False
    return (
        effective_user.id == settings.telegram_allowed_user_id
        and effective_chat.id == settings.telegram_allowed_chat_id
    )


async def _deny_unauthorized(update: Update) -> None:
    user_id = update.effective_user.id if update.effective_user else None
    LOGGER.warning("Rejected command from unauthorized user %s", user_id)
    if update.effective_message:
        await update.effective_message.reply_text("This bot is restricted to its configured owner.")


def today_in_timezone(timezone_name: str) -> date:
    return datetime.now(ZoneInfo(timezone_name)).date()


def _render_help() -> str:
    return (
        "Commands:\n"
        "/list - Everyone, sorted by upcoming birthday\n"
        "/groups - Show groups and member counts\n"
        "/group <id or name> - Show a group's members\n"
        "/people - People who share a group with you\n"
        "/help - Show this help message"
    )


def render_list_message(config: AppConfig, today: date, owner_person_id: str | None = None) -> str:
    if not config.people:
        return "No birthdays are currently tracked."

    people = sort_by_upcoming_birthday(config.people, today, config.leap_day_rule)
    cards = [
        build_card(person, today, config.leap_day_rule, current_person_id=owner_person_id)
        for person in people
    ]
    lines = [f"Tracked birthdays ({len(cards)})", "Sorted by soonest:", ""]
    lines.append("\n\n".join(render_card(card) for card in cards))
    return "\n".join(lines)


def render_groups_message(config: AppConfig, owner_person_id: str | None = None) -> str:
    if owner_person_id is not None:
        groups = groups_for_person(owner_person_id, config.groups, config.people)
        title = "Your groups"
    else:
        groups = list(config.groups)
        title = "Groups"

    if not groups:
        return "No groups found."

    lines = [title]
    for group in groups:
        count = len(members_of_group(group, config.people))
        lines.append(f"- {group.name} ({group.group_id}): {member_count_text(count)}")
    return "\n".join(lines)


def render_group_message(config: AppConfig, query: str, today: date, owner_person_id: str | None = None) -> str | None:
    group = find_group(config.groups, query)
    if group is None:
        return None

    members = sort_by_upcoming_birthday(members_of_group(group, config.people), today, config.leap_day_rule)
    cards = [
        build_card(person, today, config.leap_day_rule, current_person_id=owner_person_id)
        for person in members
    ]
    return render_group_listing(group.name, cards)


def render_people_message(config: AppConfig, owner_person_id: str, today: date) -> str:
    grouped = people_in_shared_groups(owner_person_id, config.groups, config.people)
    ordered = sort_by_upcoming_birthday(grouped, today, config.leap_day_rule)
    cards = [
        build_card(
            item.record,
            today,
            config.leap_day_rule,
            group_name=", ".join(item.group_names),
        )
        for item in ordered
    ]
    return render_people_listing(cards)


async def help_command(update: Update, context: CallbackContext) -> None:
    deps: HandlerDependencies = context.application.bot_data["handler_deps"]
    if not is_authorized(update, deps.settings):
        await _deny_unauthorized(update)
        return
    await update.effective_message.reply_text(_render_help())


async def list_command(update: Update, context: CallbackContext) -> None:
    deps: HandlerDependencies = context.application.bot_data["handler_deps"]
    settings = deps.settings
    if not is_authorized(update, settings):
        await _deny_unauthorized(update)
        return

    config = load_config(settings.birthday_config_path)
    today = today_in_timezone(config.timezone)
    await update.effective_message.reply_text(
        render_list_message(config, today, settings.owner_person_id)
    )


async def groups_command(update: Update, context: CallbackContext) -> None:
    deps: HandlerDependencies = context.application.bot_data["handler_deps"]
    settings = deps.settings
    if not is_authorized(update, settings):
        await _deny_unauthorized(update)
        return

    config = load_config(settings.birthday_config_path)
    await update.effective_message.reply_text(
        render_groups_message(config, settings.owner_person_id)
    )


async def group_command(update: Update, context: CallbackContext) -> None:
    deps: HandlerDependencies = context.application.bot_data["handler_deps"]
    settings = deps.settings
    if not is_authorized(update, settings):
        await _deny_unauthorized(update)
        return

    query = " ".join(context.args or []).strip()
    if not query:
        await update.effective_message.reply_text("Usage: /group <id or name>")
        return

    config = load_config(settings.birthday_config_path)
    today = today_in_timezone(config.timezone)
    message = render_group_message(config, query, today, settings.owner_person_id)
    if message is None:
        LOGGER.info("No group matches %r", query)
        await update.effective_message.reply_text(f"Group not found: {query}. Send /groups to see them.")
        return

    await update.effective_message.reply_text(message)


async def people_command(update: Update, context: CallbackContext) -> None:
    deps: HandlerDependencies = context.application.bot_data["handler_deps"]
    settings = deps.settings
    if not is_authorized(update, settings):
        await _deny_unauthorized(update)
        return

    if settings.owner_person_id is None:
        await update.effective_message.reply_text(
            "Set OWNER_PERSON_ID to your roster id to use /people."
        )
        return

    config = load_config(settings.birthday_config_path)
    today = today_in_timezone(config.timezone)
    await update.effective_message.reply_text(
        render_people_message(config, settings.owner_person_id, today)
    )


def build_handlers(settings: Settings) -> list:
    return [
        CommandHandler(["start", "help"], help_command),
        CommandHandler("list", list_command),
        CommandHandler("groups", groups_command),
        CommandHandler("group", group_command),
        CommandHandler("people", people_command),
    ]
