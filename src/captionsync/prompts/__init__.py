from captionsync.prompts.base import PromptSpec
from captionsync.prompts.captions import CAPTION_REWRITE_PROMPT

__all__ = ["CAPTION_REWRITE_PROMPT", "PromptSpec"]
