"""
Application Processing

Runs the prompt pass and the SOP pass over the applications CSV.
"""

from .pipeline import ApplicationPipeline
from .single_prompt import generate_single_prompt

__all__ = ['ApplicationPipeline', 'generate_single_prompt']
