import discord
from discord.ext import commands
import os
import sys
from dotenv import load_dotenv
import logging
import asyncio
from typing import List

from cogs.chat.core import ChatConfig, ConfigurationException

logger = logging.getLogger('discord')


def setup_logging():
    """Log to bot.log and the console"""
    logging.basicConfig(
        level=logging.INFO,
        format='[{asctime}] [{levelname:<8}] {name}: {message}',
        datefmt='%Y-%m-%d %H:%M:%S',
        style='{',
        handlers=[
            logging.FileHandler('bot.log', encoding='utf-8', mode='a'),
            logging.StreamHandler()
        ]
    )

    # Reduce gateway and transport verbosity
    logging.getLogger('discord.gateway').setLevel(logging.WARNING)
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)


load_dotenv()
TOKEN = os.getenv('DISCORD_TOKEN')

intents = discord.Intents.default()
intents.message_content = True
intents.guilds = True
intents.guild_messages = True


class DiscordBot(commands.Bot):
    """Discord bot hosting the chat bridge cogs"""

    def __init__(self, chat_config: ChatConfig):
        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=intents,
            max_messages=1000,
            heartbeat_timeout=60,
            guild_ready_timeout=10,
        )
        self.chat_config = chat_config
        self.cogs_dir = 'cogs'
        self.loaded_cogs: List[str] = []

    async def setup_hook(self):
        """Called after the bot is initialized but before login"""
        logger.info("Setting up bot...")
        await self.load_all_cogs()

    async def load_all_cogs(self):
        """Load all available cogs from the cogs directory"""
        self.loaded_cogs = []

        if not os.path.exists(self.cogs_dir):
            logger.warning(f"Cogs directory '{self.cogs_dir}' not found")
            return

        for item in os.listdir(self.cogs_dir):
            item_path = os.path.join(self.cogs_dir, item)

            # Skip hidden files and directories
            if item.startswith('_') or item == '__pycache__':
                continue

            # Load cog packages (directories with __init__.py)
            if os.path.isdir(item_path):
                init_path = os.path.join(item_path, '__init__.py')
                if os.path.exists(init_path):
                    try:
                        await self.load_extension(f'cogs.{item}')
                        self.loaded_cogs.append(item)
                        logger.info(f"✅ Loaded cog: {item}")
                    except Exception as e:
                        logger.error(f"❌ Failed to load cog {item}: {e}")
                        continue

        logger.info(f"Loaded {len(self.loaded_cogs)} cogs successfully")


def check_config(chat_config: ChatConfig) -> None:
    """Fail fast when a required environment variable is not set"""
    missing = [] if TOKEN else ['DISCORD_TOKEN']
    missing += chat_config.missing_settings()
    if missing:
        raise ConfigurationException(
            missing[0],
            f"Missing required environment variables: {', '.join(missing)}"
        )


async def main() -> int:
    """Validate configuration, log in and listen until stopped"""
    chat_config = ChatConfig()
    try:
        check_config(chat_config)
    except ConfigurationException as e:
        logger.error(f"❌ {e}")
        return 1

    bot = DiscordBot(chat_config)

    @bot.event
    async def on_ready():
        logger.info(f'Logged in as {bot.user}')
        logger.info(f'Connected to {len(bot.guilds)} guilds')
        logger.info(f'Loaded cogs: {", ".join(bot.loaded_cogs)}')
        logger.info("Listening...")

    @bot.event
    async def on_disconnect():
        logger.warning("Bot disconnected from Discord Gateway")

    @bot.event
    async def on_resume():
        logger.info("Bot resumed connection to Discord Gateway")

    try:
        logger.info("Starting bot...")
        async with bot:
            await bot.start(TOKEN)
    except (discord.LoginFailure, discord.PrivilegedIntentsRequired) as e:
        logger.error(f"Login Failed: {e}")
        return 1
    return 0


if __name__ == '__main__':
    setup_logging()
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("Bot stopped by keyboard interrupt")
