from guildboard.models.room import Room

__all__ = ["Room"]
