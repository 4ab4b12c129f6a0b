"""Apply all Alembic migrations: `python run_migrations.py`."""

from pathlib import Path

from alembic import command
from alembic.config import Config

BASE_DIR = Path(__file__).resolve().parent


def build_config() -> Config:
    ini_path = BASE_DIR / "alembic.ini"
    alembic_cfg = Config(str(ini_path)) if ini_path.exists() else Config()
    alembic_cfg.set_main_option("script_location", str(BASE_DIR / "alembic"))
    return alembic_cfg


if __name__ == "__main__":
    command.upgrade(build_config(), "head")
