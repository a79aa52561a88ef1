from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "smart-fridge"
    env: str = "local"
    log_level: str = "INFO"

    database_url: str = "sqlite:///./smart_fridge.db"

    llm_provider: str = "openai"
    llm_model: str = "gpt-4o-mini"
    llm_api_key: str = ""
    llm_temperature: float = 0.7
    llm_max_tokens: int = 2048
    llm_timeout_s: int = 30
    # When set, recipe text is generated by the remote proxy function at this URL
    # instead of the local DSPy language model.
    llm_gateway_url: str = ""
    llm_gateway_token: str = ""

    recipe_count: int = 5
    recipe_cuisine_focus: str = "Thai"

    # substring | exact. Substring mirrors the catalog's fuzzy lookup ("egg" also hits "eggplant").
    product_match_mode: str = "substring"
    default_product_unit: str = "pcs"

    expiring_window_days: int = 5
    expiring_soon_days: int = 3
    fridge_capacity: int = 50

    class Config:
        env_file = ".env"


settings = Settings()
