"""
App prompt builders: system and user prompts for content generation.
All prompt content lives here; content services receive built prompts.
"""

from quickstudy.prompt_builders.content import build_content_prompts

__all__ = [
    "build_content_prompts",
]
