from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "reservation-estimate"

    # JSON file with PricingRules; empty means the built-in defaults
    PRICING_RULES_PATH: str = ""

    # Messaging channel opened after a successful submit
    CONTACT_URL: str = "https://line.me/ti/p/Kv76GQK_UI"

    OPTION_MAX_QUANTITY: int = 99

    HOST: str = "127.0.0.1"
    PORT: int = 8000

    class Config:
        env_file = ".env"


settings = Settings()
