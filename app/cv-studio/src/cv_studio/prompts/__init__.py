"""Prompt templates, one ``.txt`` file per system or user prompt."""

from functools import lru_cache
from pathlib import Path

PROMPTS_DIR = Path(__file__).parent


@lru_cache(maxsize=None)
def load_prompt(name: str) -> str:
    """Return the template stored in ``<name>.txt``; raises FileNotFoundError if absent."""
    return (PROMPTS_DIR / f"{name}.txt").read_text(encoding="utf-8")


__all__ = ["load_prompt", "PROMPTS_DIR"]
