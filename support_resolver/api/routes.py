from fastapi import APIRouter, Depends, Request

from support_resolver.api.schemas import AskRequest, AskResponse, HealthResponse, Source
from support_resolver.pipeline.graph import SupportPipeline

router = APIRouter()


def get_pipeline(request: Request) -> SupportPipeline:
    return request.app.state.pipeline


@router.post("/ask", response_model=AskResponse, tags=["Chat"])
async def ask(body: AskRequest, pipeline: SupportPipeline = Depends(get_pipeline)):
    """
    Answer one customer question.

    A strict policy answer is returned verbatim when one applies; otherwise
    the answer is grounded on the matched FAQ entries.
    """
    result = await pipeline.resolve(body.question)
    return AskResponse(
        answer=result.answer,
        policy=result.policy_id,
        method=result.policy_method,
        matched_sources=[Source(question=s.question, category=s.category) for s in result.matched_sources],
    )


@router.get("/health", response_model=HealthResponse, tags=["System"])
async def health(pipeline: SupportPipeline = Depends(get_pipeline)):
    stats = pipeline.cache.stats()
    if not stats["ready"]:
        status = "starting"
    elif stats["failures"]:
        status = "degraded"
    else:
        status = "healthy"
    return HealthResponse(
        status=status,
        embeddings_ready=stats["ready"],
        faq_total=stats["faq_total"],
        faq_embedded=stats["faq_embedded"],
        policy_total=stats["policy_total"],
        policy_embedded=stats["policy_embedded"],
        failures=stats["failures"],
    )
