import asyncio
import logging
import secrets
from collections.abc import Callable, Awaitable
from functools import wraps
from typing import Any, Optional

from telegram import Update, Message
from telegram.constants import ChatType
from telegram.ext import CallbackContext, BaseHandler, CommandHandler, Application

from errors import BorgaError, UserAlreadyExists
from literals import (WELCOME_STRING, NOT_REGISTERED_STRING, PRIVATE_CHAT_ONLY_STRING, INVALID_GROUP_ID_STRING,
                      NEW_GROUP_USAGE, GROUP_USAGE, RENAME_USAGE, DELETE_GROUP_USAGE, ADD_GAME_USAGE,
                      REMOVE_GAME_USAGE)
from models import UserName, Token, GroupId
from services.borga_service import BorgaService
from utils import command_args, parse_group_id, parse_name_and_description, fmt_group, escape

TOKEN_BYTES = 32

type TokenCallback = Callable[[Any, Update, CallbackContext, Token], Awaitable[None]]


def restrict_to_chat_type(message: str, chat_types: set[ChatType]):
    def decorator(callback: Callable[..., Awaitable[None]]):
        @wraps(callback)
        async def wrapper(self: Any, update: Update, callback_context: CallbackContext, *args):
            if update.message.chat.type not in chat_types:
                await update.message.reply_text(message)
                return
            await callback(self, update, callback_context, *args)

        return wrapper

    return decorator


def reply_errors(callback: Callable[..., Awaitable[None]]):
    """Replies with the message of any BorgaError raised by the callback instead of propagating it"""
    @wraps(callback)
    async def wrapper(self: Any, update: Update, callback_context: CallbackContext, *args):
        try:
            await callback(self, update, callback_context, *args)
        except BorgaError as e:
            logging.getLogger(self.__class__.__name__).info("Command %r failed with %s", update.message.text, e.code)
            await update.message.reply_text(str(e))

    return wrapper


class BorgaBot:
    def __init__(self, service: BorgaService, application: Application):
        self.__service = service
        self.__application = application
        self.__logger = logging.getLogger(self.__class__.__name__)
        application.add_handlers(self._get_handlers())
        application.add_error_handler(self._handle_error)

    @property
    def application(self) -> Application:
        return self.__application

    @staticmethod
    def user_name(update: Update) -> UserName:
        return str(update.message.from_user.id)

    @staticmethod
    def requires_token(callback: TokenCallback):
        """Passes the sender's token to the callback, or asks the sender to register if there is none"""
        @wraps(callback)
        async def wrapper(self: 'BorgaBot', update: Update, callback_context: CallbackContext):
            token = await self.__service.get_user_token(BorgaBot.user_name(update))
            if token is None:
                await update.message.reply_text(NOT_REGISTERED_STRING)
                return
            await callback(self, update, callback_context, token)

        return wrapper

    @staticmethod
    async def __parse_group_id(message: Message, text: str) -> Optional[GroupId]:
        group_id = parse_group_id(text)
        if group_id is None:
            await message.reply_text(INVALID_GROUP_ID_STRING)
        return group_id

    @restrict_to_chat_type(PRIVATE_CHAT_ONLY_STRING, {ChatType.PRIVATE})
    async def _handle_start(self, update: Update, _: CallbackContext):
        user_name = self.user_name(update)
        try:
            await self.__service.create_user(user_name)
        except UserAlreadyExists:
            self.__logger.debug("User %s is already registered", user_name)

        if await self.__service.get_user_token(user_name) is None:
            await self.__service.connect_token_with_user(secrets.token_urlsafe(TOKEN_BYTES), user_name)
        await update.message.reply_text(WELCOME_STRING)

    @restrict_to_chat_type(PRIVATE_CHAT_ONLY_STRING, {ChatType.PRIVATE})
    @requires_token
    @reply_errors
    async def _handle_new_group(self, update: Update, _: CallbackContext, token: Token):
        args = command_args(update.message.text, maxsplit=0)
        if not args:
            await update.message.reply_text(NEW_GROUP_USAGE)
            return
        name, description = parse_name_and_description(args[0])
        group_id = await self.__service.execute_authed(token, "create_group", name, description)
        await update.message.reply_markdown_v2(rf"Created __{escape(name)}__ with id {group_id}\. "
                                               rf"Add games with /addgame {group_id} _game id_")

    @restrict_to_chat_type(PRIVATE_CHAT_ONLY_STRING, {ChatType.PRIVATE})
    @requires_token
    @reply_errors
    async def _handle_groups(self, update: Update, _: CallbackContext, token: Token):
        group_ids = await self.__service.execute_authed(token, "get_user_groups")
        if not group_ids:
            await update.message.reply_text("You have no groups yet, create one with /newgroup")
            return
        groups = await asyncio.gather(*(self.__service.get_group(group_id) for group_id in group_ids))
        message = (f"Your groups:\n\n"
                   f"{"\n".join(rf"{group.id}\. {escape(group.name)} \({len(group.games)} games\)" for group in groups)}")
        await update.message.reply_markdown_v2(message)

    @restrict_to_chat_type(PRIVATE_CHAT_ONLY_STRING, {ChatType.PRIVATE})
    @requires_token
    @reply_errors
    async def _handle_group(self, update: Update, _: CallbackContext, token: Token):
        args = command_args(update.message.text)
        if len(args) != 1:
            await update.message.reply_text(GROUP_USAGE)
            return
        group_id = await self.__parse_group_id(update.message, args[0])
        if group_id is None:
            return
        group = await self.__service.get_group(group_id)
        await update.message.reply_markdown_v2(fmt_group(group))

    @restrict_to_chat_type(PRIVATE_CHAT_ONLY_STRING, {ChatType.PRIVATE})
    @requires_token
    @reply_errors
    async def _handle_rename(self, update: Update, _: CallbackContext, token: Token):
        args = command_args(update.message.text, maxsplit=1)
        if len(args) != 2:
            await update.message.reply_text(RENAME_USAGE)
            return
        group_id = await self.__parse_group_id(update.message, args[0])
        if group_id is None:
            return
        await self.__service.execute_authed(token, "change_group_name", group_id, args[1])
        await update.message.reply_markdown_v2(rf"Group {group_id} is now called __{escape(args[1])}__")

    @restrict_to_chat_type(PRIVATE_CHAT_ONLY_STRING, {ChatType.PRIVATE})
    @requires_token
    @reply_errors
    async def _handle_delete_group(self, update: Update, _: CallbackContext, token: Token):
        args = command_args(update.message.text)
        if len(args) != 1:
            await update.message.reply_text(DELETE_GROUP_USAGE)
            return
        group_id = await self.__parse_group_id(update.message, args[0])
        if group_id is None:
            return
        await self.__service.execute_authed(token, "delete_group", group_id)
        await update.message.reply_text(f"Deleted group {group_id}")

    @restrict_to_chat_type(PRIVATE_CHAT_ONLY_STRING, {ChatType.PRIVATE})
    @requires_token
    @reply_errors
    async def _handle_add_game(self, update: Update, _: CallbackContext, token: Token):
        args = command_args(update.message.text)
        if len(args) != 2:
            await update.message.reply_text(ADD_GAME_USAGE)
            return
        group_id = await self.__parse_group_id(update.message, args[0])
        if group_id is None:
            return
        game_id = await self.__service.execute_authed(token, "add_game_to_group_by_id", group_id, args[1])
        group = await self.__service.get_group(group_id)
        await update.message.reply_markdown_v2(rf"Added __{escape(group.games[game_id].name)}__ to "
                                               rf"*{escape(group.name)}*")

    @restrict_to_chat_type(PRIVATE_CHAT_ONLY_STRING, {ChatType.PRIVATE})
    @requires_token
    @reply_errors
    async def _handle_remove_game(self, update: Update, _: CallbackContext, token: Token):
        args = command_args(update.message.text)
        if len(args) != 2:
            await update.message.reply_text(REMOVE_GAME_USAGE)
            return
        group_id = await self.__parse_group_id(update.message, args[0])
        if group_id is None:
            return
        await self.__service.execute_authed(token, "delete_game_from_group", group_id, args[1])
        await update.message.reply_text(f"Removed {args[1]} from group {group_id}")

    async def _handle_error(self, update: object, callback_context: CallbackContext):
        self.__logger.error("Exception while handling update %s", update, exc_info=callback_context.error)

    def _get_handlers(self) -> list[BaseHandler]:
        return [
            CommandHandler("start", self._handle_start),
            CommandHandler("newgroup", self._handle_new_group),
            CommandHandler("groups", self._handle_groups),
            CommandHandler("group", self._handle_group),
            CommandHandler("rename", self._handle_rename),
            CommandHandler("deletegroup", self._handle_delete_group),
            CommandHandler("addgame", self._handle_add_game),
            CommandHandler("removegame", self._handle_remove_game),
        ]
