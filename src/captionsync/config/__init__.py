from captionsync.config.settings import Settings

__all__ = ["Settings"]
