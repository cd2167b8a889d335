from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import structlog

from pigeon_prestige.core.config import settings
from pigeon_prestige.core.logging_config import configure_logging

# IMPORTANTE: Importar Base y Engine para que funcione la creación de tablas
from pigeon_prestige.db.session import engine, Base

# Importar modelos para que SQLAlchemy los "vea" antes de crear las tablas
from pigeon_prestige.db.models import _all

from pigeon_prestige.services.errors import ConflictError, GameRuleError, NotFoundError

# Importar las rutas (los routers)
from pigeon_prestige.api.auth import router as auth_router
from pigeon_prestige.api.pigeons import router as pigeons_router
from pigeon_prestige.api.foods import router as foods_router
from pigeon_prestige.api.groups import router as groups_router
from pigeon_prestige.api.races import router as races_router
from pigeon_prestige.api.admin import router as admin_router
from pigeon_prestige.api.breeding import router as breeding_router
from pigeon_prestige.api.market import router as market_router

configure_logging()
logger = structlog.get_logger()

app = FastAPI(
    title="Pigeon Prestige",
    version="1.0.0"
)

# Creamos las tablas en la base de datos
Base.metadata.create_all(bind=engine)

# Conectamos las piezas (routers)
app.include_router(auth_router)
app.include_router(pigeons_router)
app.include_router(foods_router)
app.include_router(groups_router)
app.include_router(races_router)
app.include_router(admin_router)
app.include_router(breeding_router)
app.include_router(market_router)


# Errores de las reglas del juego -> respuestas HTTP
@app.exception_handler(NotFoundError)
def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})

@app.exception_handler(ConflictError)
def conflict_handler(request: Request, exc: ConflictError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})

@app.exception_handler(GameRuleError)
def game_rule_handler(request: Request, exc: GameRuleError):
    logger.info("Operación rechazada", path=request.url.path, reason=str(exc))
    return JSONResponse(status_code=400, content={"detail": str(exc)})


# Configuramos el permiso para que el frontend pueda hablar con Python
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/")
def read_root():
    return {"message": "API Pigeon Prestige funcionando 🕊️"}
