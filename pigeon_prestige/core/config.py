"""Configuración de la aplicación (variables de entorno / .env)."""

from datetime import date
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Ajustes de Pigeon Prestige."""

    # Base de datos
    database_url: str = Field(default="sqlite:///./pigeon_prestige.db", description="URL SQLAlchemy")

    # Auth
    secret_key: str = Field(default="cambia-esta-clave", description="Clave para firmar los JWT")
    algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=60 * 24)

    # API
    cors_origins: list[str] = Field(default=["http://localhost:5173", "http://127.0.0.1:5173"])
    log_level: str = Field(default="INFO")

    # Jugadores nuevos
    starting_balance: float = Field(default=1000.0)
    starting_pigeons: int = Field(default=5)

    # Alimentación diaria
    daily_ration: int = Field(default=100, description="Unidades que consume una mezcla al 100% por paloma y día")
    fill_percent: int = Field(default=10, description="Porcentaje usado al rellenar un hueco vacío de la mezcla")
    first_shortage_penalty: float = Field(default=0.05)
    repeat_shortage_penalty: float = Field(default=0.10)
    feeding_precedence: Literal["individual", "group", "none"] = Field(default="individual")

    # Carreras
    lost_probability: float = Field(default=0.1)
    miracle_probability: float = Field(default=0.05)

    # Cría y mercado
    breeding_better_parent_chance: float = Field(default=0.6, description="Probabilidad de heredar la stat del mejor progenitor")
    market_listing_days: int = Field(default=7, description="Días que un anuncio sigue activo")

    # Tiempo de juego
    game_start_date: date = Field(default=date(1900, 1, 1))

    class Config:
        env_file = ".env"


settings = Settings()
