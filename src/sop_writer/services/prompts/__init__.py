from .prompt_builder import build_sop_prompt

__all__ = ["build_sop_prompt"]
