from .models import AchievementProgress, PlayerState, PrestigeState, parse_timestamp, utcnow

__all__ = ["AchievementProgress", "PlayerState", "PrestigeState", "parse_timestamp", "utcnow"]
