from __future__ import annotations

from captionsync.prompts.base import PromptSpec


CAPTION_REWRITE_PROMPT = PromptSpec(
    system=(
        "You are a professional caption writer who creates engaging, readable captions "
        "for video content. Focus on natural pacing and emotional flow."
    ),
    template=(
        "Transform the following story content into optimized caption text suitable for video.\n"
        "Each caption should be 1-2 lines, easy to read, and naturally paced for storytelling.\n"
        "Consider emotional beats and natural pauses.\n\n"
        "Story style: {style}\n"
        "Target duration: {target_duration} seconds\n"
        "- {language_directive}\n"
        "- Return plain text only, no timestamps or numbering.\n\n"
        "Story content:\n"
        "{text}\n"
    ),
)
