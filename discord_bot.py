import asyncio
import logging
import os
from typing import Iterable, List

import discord
from dotenv import load_dotenv

from cyber_news.config import Settings
from cyber_news.core import NewsService, TrendReport
from cyber_news.exceptions import InputRejected
from cyber_news.logging_utils import setup_logging
from cyber_news.models import Brief, FeedSource, SearchHit

DISCORD_LIMIT = 2000

logger = logging.getLogger("cyber_news.discord_bot")


def clip(text: str, limit: int = DISCORD_LIMIT) -> str:
    """Keep a message under Discord's length limit."""
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


def format_feeds(feeds: Iterable[FeedSource]) -> str:
    lines = ["📡 Feeds\n"]
    for f in feeds:
        lines.append(f"**{f.name}** ({f.category}) - {f.description}")
    return clip("\n".join(lines))


def format_hits(keywords: List[str], hits: List[SearchHit]) -> str:
    if not hits:
        return f"No articles match: {', '.join(keywords)}"
    lines = [f"🔎 {len(hits)} results for {', '.join(keywords)}\n"]
    for h in hits:
        lines.append(f"**{h.article.title}** ({round(h.score, 2)})")
        lines.append(f"*{h.source} - {h.article.published_at.strftime('%Y-%m-%d %H:%M')}*")
        lines.append(f"<{h.article.link}>\n")
    return clip("\n".join(lines))


def format_trends(report: TrendReport) -> str:
    if not report.topics:
        return f"No trending topics in the last {report.days_analyzed} days ({report.total_items} articles)."
    lines = [f"📈 Trending over {report.days_analyzed} days ({report.total_items} articles)\n"]
    for t in report.topics:
        lines.append(f"**{t.topic}** - {t.mentions} mentions [{t.category}]")
        for a in t.articles[:3]:
            lines.append(f"  • <{a.link}>")
    return clip("\n".join(lines))


def format_briefs(briefs: List[Brief]) -> str:
    if not briefs:
        return "No news briefs available."
    lines = ["📰 News briefs\n"]
    for b in briefs:
        lines.append(f"**{b.title}** [{b.category}]")
        lines.append(f"*{b.source} - {b.published_at.strftime('%Y-%m-%d')}*")
        lines.append(b.summary)
        lines.append(f"<{b.link}>\n")
    return clip("\n".join(lines))


def handle_command(service: NewsService, content: str) -> str:
    """Turn one chat command into a reply. Unknown commands get the help text."""
    parts = content.split()
    command, args = parts[0].lower(), parts[1:]

    if command == "!feeds":
        return format_feeds(service.list_feeds(args[0] if args else None))
    if command == "!search":
        hits = service.search_by_keywords(args, max_results=5)
        return format_hits(args, hits)
    if command == "!trends":
        days = int(args[0]) if args and args[0].isdigit() else 7
        return format_trends(service.get_trending_topics(days_back=days, min_mentions=3, max_topics=5))
    if command == "!briefs":
        return format_briefs(service.get_news_briefs(category=args[0] if args else None, max_briefs=3))
    return HELP


HELP = (
    "Commands:\n"
    "`!feeds [category]` list sources\n"
    "`!search <keyword> [...]` ranked search\n"
    "`!trends [days]` trending topics\n"
    "`!briefs [category]` latest briefs"
)

COMMANDS = {"!feeds", "!search", "!trends", "!briefs", "!help"}


def main() -> None:
    load_dotenv()

    # Token goes in .env as DISCORD_BOT_TOKEN="YOUR_BOT_TOKEN"
    token = os.getenv("DISCORD_BOT_TOKEN")
    if not token:
        raise ValueError("DISCORD_BOT_TOKEN is not set. Check your .env file.")

    settings = Settings.from_env(dotenv=False)
    setup_logging(settings.log_level, log_file=settings.log_file)
    service = settings.build_service()

    intents = discord.Intents.default()
    intents.message_content = True  # needed to read commands

    client = discord.Client(intents=intents)

    @client.event
    async def on_ready():
        logger.info("Logged in as %s", client.user)

    @client.event
    async def on_message(message):
        # Ignore our own messages
        if message.author == client.user:
            return
        if not message.content or message.content.split()[0].lower() not in COMMANDS:
            return

        try:
            # Feed refreshes block; keep them off the event loop
            reply = await asyncio.get_running_loop().run_in_executor(None, handle_command, service, message.content)
        except InputRejected as e:
            reply = f"⚠️ {e}"
        except Exception:
            logger.exception("Command failed: %s", message.content[:100])
            reply = "Something went wrong while fetching the news."
        await message.channel.send(reply)

    try:
        client.run(token)
    finally:
        service.close()


if __name__ == "__main__":
    main()
