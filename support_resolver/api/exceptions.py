from fastapi import Request
from fastapi.responses import JSONResponse

from support_resolver.exceptions import GenerationError
from support_resolver.logging_config import logger


async def validation_exception_handler(request: Request, exc):
    return JSONResponse(
        status_code=422,
        content={"message": "Validation Error", "details": str(exc)},
    )


async def generation_exception_handler(request: Request, exc: GenerationError):
    logger.error("Answer generation failed", extra={"path": request.url.path, "error": exc.message})
    return JSONResponse(status_code=500, content={"error": "AI error"})
