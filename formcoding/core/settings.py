"""Unified settings for multipart-form-coding."""

import tomllib
from pathlib import Path
from typing import ClassVar, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

MAX_FILE_SIZE = 10 * 1024 * 1024


def read_pyproject(pyproject_path: Path) -> dict:
    """Read pyproject.toml into a dict, empty when running from an installed wheel."""
    if not pyproject_path.is_file():
        return {}
    with pyproject_path.open("rb") as file_handle:
        return tomllib.load(file_handle)


def get_version(base_dir: Path) -> str:
    """Get version from git tags or fallback to package metadata."""
    import importlib.metadata

    try:
        # GitPython raises ImportError when no git executable is on PATH
        import git
    except ImportError:
        git = None

    if git is not None:
        try:
            repo = git.Repo(base_dir, search_parent_directories=True)
            latest_tag = max(repo.tags, key=lambda t: t.commit.committed_datetime, default=None)
            if latest_tag:
                return str(latest_tag)
        except git.exc.GitError:
            pass

    try:
        return importlib.metadata.version("multipart-form-coding")
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0"


class Settings(BaseSettings):
    """Unified settings for the multipart-form-coding service."""

    DEBUG: bool = True
    ENVIRONMENT: Literal["DEV", "PROD"] = "DEV"

    # ClassVar to prevent Pydantic from trying to load from env
    BASE_DIR: ClassVar[Path] = Path(__file__).parent.parent.parent
    PROJECT: ClassVar[dict] = read_pyproject(BASE_DIR / "pyproject.toml")
    API_NAME: ClassVar[str] = PROJECT.get("project", {}).get("name", "multipart-form-coding")
    API_DESCRIPTION: ClassVar[str] = PROJECT.get("project", {}).get(
        "description", "RFC 7578 multipart/form-data encoding and upload validation"
    )
    API_VERSION: ClassVar[str] = get_version(BASE_DIR)

    # Server
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # Uploads
    MAX_FILE_SIZE: int = MAX_FILE_SIZE
    DEFAULT_FIELD_NAME: str = "file"

    @property
    def api_url(self) -> str:
        return f"http://{self.API_HOST}:{self.API_PORT}"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()  # type: ignore
