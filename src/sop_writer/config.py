from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash-lite-preview-06-17"
DEFAULT_OPENROUTER_MODEL = "deepseek/deepseek-chat-v3-0324:free"


class Settings(BaseSettings):
    """
    Centralized runtime configuration for the SOP writer.
    Built once at startup and handed to each component; ops override via ENV.
    """

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore", populate_by_name=True
    )

    # --- Credentials ---
    gemini_api_key: str
    openrouter_api_key: str

    # --- Paths (SOP_BASE_DIR, SOP_DATA_DIR, ...) ---
    base_dir: Path = Field(
        default_factory=Path.cwd, validation_alias=AliasChoices("base_dir", "sop_base_dir")
    )
    data_dir: Optional[Path] = Field(None, validation_alias=AliasChoices("data_dir", "sop_data_dir"))
    csv_file: Optional[Path] = Field(None, validation_alias=AliasChoices("csv_file", "sop_csv_file"))
    prompts_dir: Optional[Path] = Field(
        None, validation_alias=AliasChoices("prompts_dir", "sop_prompts_dir")
    )
    resumes_dir: Optional[Path] = Field(
        None, validation_alias=AliasChoices("resumes_dir", "sop_resumes_dir")
    )
    sops_dir: Optional[Path] = Field(None, validation_alias=AliasChoices("sops_dir", "sop_sops_dir"))

    # --- Metadata extraction (Gemini) ---
    gemini_model: str = DEFAULT_GEMINI_MODEL
    gemini_temperature: float = 0.4
    gemini_top_k: int = 1
    gemini_top_p: float = 1.0
    gemini_max_output_tokens: int = 2048
    gemini_api_base: str = "https://generativelanguage.googleapis.com/v1beta"

    # --- SOP generation (OpenRouter) ---
    openrouter_model: str = DEFAULT_OPENROUTER_MODEL
    openrouter_api_url: str = "https://openrouter.ai/api/v1/chat/completions"
    openrouter_site_url: str = "http://localhost"
    openrouter_app_name: str = "SOP Writer"

    # --- Timeouts (seconds) ---
    request_timeout: float = 30
    llm_request_timeout: float = 180

    @field_validator("gemini_api_key", "openrouter_api_key")
    @classmethod
    def _require_key(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("API key must not be blank")
        return value.strip()

    @model_validator(mode="after")
    def _derive_paths(self) -> "Settings":
        self.base_dir = Path(self.base_dir)
        if self.data_dir is None:
            self.data_dir = self.base_dir / "data"
        if self.csv_file is None:
            self.csv_file = self.data_dir / "applications.csv"
        if self.prompts_dir is None:
            self.prompts_dir = self.base_dir / "prompts"
        if self.resumes_dir is None:
            self.resumes_dir = self.base_dir / "resume"
        if self.sops_dir is None:
            self.sops_dir = self.base_dir / "sops"
        return self

    def generation_config(self) -> Dict[str, Any]:
        """Return the Gemini ``generationConfig`` block."""
        return {
            "temperature": self.gemini_temperature,
            "topK": self.gemini_top_k,
            "topP": self.gemini_top_p,
            "maxOutputTokens": self.gemini_max_output_tokens,
        }

    def secret_values(self) -> List[str]:
        return [self.gemini_api_key, self.openrouter_api_key]


def load_settings(**overrides: Any) -> Settings:
    """Build the settings, turning validation problems into ConfigurationError.

    Args:
        **overrides: Values that take precedence over the environment

    Returns:
        Settings: The validated configuration

    Raises:
        ConfigurationError: If a required value is missing or invalid
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        problems = []
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"])
            if error["type"] == "missing":
                problems.append(f"{field.upper()} environment variable not set")
            else:
                problems.append(f"{field}: {error['msg']}")
        raise ConfigurationError("; ".join(problems)) from e
