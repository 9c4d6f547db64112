"""
Nuvra AI - Análise de marketing e código com CRM de leads
=========================================================

Aplicação principal FastAPI.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
import structlog
import time

from nuvra.core.config import settings
from nuvra.core.database import init_db, close_db


# Configurar logging estruturado
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer() if settings.is_production
            else structlog.dev.ConsoleRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Ciclo de vida da aplicação.
    """
    from nuvra.services.crm_service import seed_pipeline

    logger.info("🚀 Iniciando Nuvra AI", env=settings.app_env, llm_enabled=settings.llm_enabled)
    await init_db()
    await seed_pipeline()
    logger.info("✅ Banco de dados conectado")

    yield

    logger.info("🛑 Encerrando Nuvra AI")
    await close_db()
    logger.info("✅ Conexões fechadas")


app = FastAPI(
    title=settings.app_name,
    description="""
    ## Nuvra AI

    Especialista em marketing digital, estratégia, tecnologia e programação full stack.

    ### Recursos
    - Análise de textos de marketing com score, sugestões e versão otimizada
    - Análise de código
    - Chat com a IA da Nuvra
    - CRM de leads: lista, pipeline e analytics
    """,
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = (time.time() - start_time) * 1000

    if settings.is_development or process_time > 1000:
        logger.info(
            "request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round(process_time, 2)
        )

    response.headers["X-Process-Time"] = str(round(process_time, 2))
    return response


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exc_info=True
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Erro interno do servidor",
            "error": str(exc) if settings.is_development else None
        }
    )


# ===========================================
# ENDPOINTS BASE
# ===========================================

@app.get("/", tags=["Health"])
async def root():
    return {
        "name": settings.app_name,
        "version": "0.1.0",
        "status": "running",
        "docs": "/docs" if settings.is_development else "disabled"
    }


@app.get("/health", tags=["Health"])
async def health_check():
    return {
        "status": "healthy",
        "environment": settings.app_env,
        "checks": {"api": "ok"},
        "llm_enabled": settings.llm_enabled
    }


@app.get("/health/ready", tags=["Health"])
async def readiness_check():
    from nuvra.core.database import engine

    checks = {"database": "unknown"}

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"error: {str(e)}"

    all_ok = all(v == "ok" for v in checks.values())

    return {
        "status": "ready" if all_ok else "not_ready",
        "checks": checks
    }


# ===========================================
# ROUTERS
# ===========================================

from nuvra.api.users import router as users_router
from nuvra.api.analysis import router as analysis_router
from nuvra.api.chat import router as chat_router
from nuvra.api.crm import router as crm_router

app.include_router(users_router, prefix="/users", tags=["Usuários"])
app.include_router(analysis_router, tags=["Análise"])
app.include_router(chat_router, prefix="/chat", tags=["Chat"])
app.include_router(crm_router, prefix="/crm", tags=["CRM"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "nuvra.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development
    )
