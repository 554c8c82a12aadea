from support_resolver.pipeline.graph import MatchedSource, ResolveResult, SupportPipeline, build_pipeline

__all__ = ["MatchedSource", "ResolveResult", "SupportPipeline", "build_pipeline"]
