from guildboard.services.bot.interactions import PendingBotEvent, handle_interaction, store_bot_event

__all__ = ["PendingBotEvent", "handle_interaction", "store_bot_event"]
