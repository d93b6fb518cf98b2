import os
from functools import lru_cache
from pathlib import Path

from workflow_embargo.adapters.sqlite.migrator import SQLiteMigrator
from workflow_embargo.context import ServiceContext
from workflow_embargo.rules.loader import load_rules
from workflow_embargo.rules.models import Rules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("EMBARGO_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "embargo.db")
        self.migrations_dir = str(self.base_dir / "migrations")
        self.rules_path = Path(os.environ.get("EMBARGO_RULES_PATH", self.base_dir / "rules.yaml"))


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules() -> Rules:
    return load_rules(get_settings().rules_path)


# --- Context ---
@lru_cache
def get_context() -> ServiceContext:
    settings = get_settings()
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    SQLiteMigrator(settings.db_path, settings.migrations_dir).run_migrations()
    return ServiceContext.create(settings.db_path, get_rules())
