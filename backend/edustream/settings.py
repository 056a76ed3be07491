from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PLACEHOLDER_API_KEYS = {"your_api_key_here"}


class Settings(BaseSettings):
	# Accept the original API_KEY name too
	gemini_api_key: str | None = Field(default=None, validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY"))
	# Provider can be "vertex" (Vertex AI Express) or "ai_studio" (Generative Language API)
	gemini_provider: str = Field(default="ai_studio", validation_alias="GEMINI_PROVIDER")
	gemini_model: str = Field(default="gemini-2.5-flash", validation_alias="GEMINI_MODEL")
	vertex_region: str = Field(default="us-central1", validation_alias="GEMINI_VERTEX_REGION")
	vertex_project: str | None = Field(default=None, validation_alias="GEMINI_VERTEX_PROJECT")

	# API server
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")
	host: str = Field(default="0.0.0.0", validation_alias="HOST")
	port: int = Field(default=5000, validation_alias="PORT")

	# Portal (client data-access layer)
	api_base_url: str = Field(default="http://localhost:5000/api", validation_alias="PORTAL_API_BASE_URL")
	# Origin the UI is served from; only used to classify connection failures
	app_origin: str | None = Field(default=None, validation_alias="PORTAL_APP_ORIGIN")
	local_store_dir: str = Field(default="./.edustream", validation_alias="PORTAL_LOCAL_STORE_DIR")
	demo_mode: bool = Field(default=False, validation_alias="PORTAL_DEMO_MODE")

	model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

	@property
	def ai_configured(self) -> bool:
		key = (self.gemini_api_key or "").strip()
		return len(key) >= 5 and key not in PLACEHOLDER_API_KEYS


settings = Settings()
