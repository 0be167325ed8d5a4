from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings. Loaded from FAMGRAPH_* environment variables or a .env file.
    """

    # --- Storage ---
    DATABASE_PATH: str = Field("family_graph.db", description="SQLite file holding profiles.")

    # --- Viewport ---
    VIEWPORT_WIDTH: int = Field(1280, description="Canvas width in pixels.")
    VIEWPORT_HEIGHT: int = Field(800, description="Canvas height in pixels.")

    # --- Simulation ---
    PARTICLE_COUNT: int = Field(20, description="Ambient particles when the overlay is on.")
    RANDOM_SEED: int | None = Field(None, description="Seed for jiggle and particles.")
    MAX_SETTLE_TICKS: int = Field(1000, description="Upper bound on ticks when settling.")

    # --- Output ---
    OUTPUT_DIR: str = Field(".", description="Where rendered SVG/PNG/PDF files go.")
    LOG_LEVEL: str = Field("INFO", description="Root level for famgraph loggers.")

    model_config = SettingsConfigDict(
        env_prefix="FAMGRAPH_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


def get_settings() -> Settings:
    return Settings()
