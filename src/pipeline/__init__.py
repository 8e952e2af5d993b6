"""End-to-end profile pipeline."""

from src.pipeline.service import PipelineResult, ProfilePipeline, profile_completion

__all__ = ["ProfilePipeline", "PipelineResult", "profile_completion"]
