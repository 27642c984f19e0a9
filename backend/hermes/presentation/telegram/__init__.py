from .bot import TelegramBot
from .messages import render_outcome

__all__ = ["TelegramBot", "render_outcome"]
