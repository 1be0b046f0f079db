"""Service layer modules for the Thumbnail Generation Service."""
from .cache_service import TTLCache
from .style_selector import StyleSelector, STYLE_CATALOG
from .prompt_composer import PromptComposer, SceneReasoner, assemble_prompt
from .generation_executor import GenerationExecutor
from .face_swap import FaceSwapProcessor
from .generation_pipeline import GenerationPipeline
from .multilang_controller import MultiLanguageController
from .dictionary_builder import ChannelDictionaryBuilder
from .pattern_analyzer import ChannelPatternAnalyzer, PatternResult
from .style_profiler import StyleProfiler
from .context_summary import build_context_summary

__all__ = [
    "TTLCache", "StyleSelector", "STYLE_CATALOG", "PromptComposer", "SceneReasoner",
    "assemble_prompt", "GenerationExecutor", "FaceSwapProcessor", "GenerationPipeline",
    "MultiLanguageController", "ChannelDictionaryBuilder", "ChannelPatternAnalyzer",
    "PatternResult", "StyleProfiler", "build_context_summary"
]
