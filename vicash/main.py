import os
import logging
from pathlib import Path
from fastapi import FastAPI
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from dotenv import load_dotenv

# Carrega variáveis de ambiente do .env antes de importar módulos que leem os.getenv
project_root = Path(__file__).resolve().parent.parent
load_dotenv(project_root / ".env")
load_dotenv(".env")

from vicash.api.route import router  # noqa: E402
from vicash.middleware.tenant import tenant_context_middleware  # noqa: E402

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Vicash API",
    description="API multi-tenant de finanças pessoais (um schema PostgreSQL por tenant)",
    version="1.0.0",
)

# Configuração CORS
# Pode ser configurado via variável de ambiente CORS_ORIGINS (separado por vírgula)
cors_origins_env = os.getenv("CORS_ORIGINS", "http://localhost:3000")
cors_origins = [origin.strip() for origin in cors_origins_env.split(",") if origin.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def _tenant_context(request: Request, call_next):
    return await tenant_context_middleware(request, call_next)


app.include_router(router)


def _error_payload(*, message: str, details: object | None = None) -> dict:
    payload: dict = {"message": message}
    if details is not None:
        payload["details"] = details
    return payload


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Normaliza erros HTTP do FastAPI/Starlette para {"message": ...}.
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_payload(message=message),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Erros de validação de entrada viram 400 (campo ausente/inválido).
    return JSONResponse(
        status_code=400,
        content=_error_payload(message="Invalid request", details=jsonable_encoder(exc.errors())),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    # Detalhe completo só no log do servidor; o cliente recebe mensagem genérica.
    logger.error(f"Erro não tratado em {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=_error_payload(message="Internal server error"),
    )
