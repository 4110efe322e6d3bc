import os

class Settings:
    def __init__(self):
        # MongoDB Database
        self.MONGODB_URL: str = os.getenv("MONGODB_URL", "mongodb://localhost:27017")
        self.MONGODB_DATABASE: str = os.getenv("MONGODB_DATABASE", "salons_chat_db")

        # Validate MongoDB URL
        self._validate_mongodb_url()

        # Security
        self.SECRET_KEY: str = os.getenv("SECRET_KEY", "salons-chat-dev-secret-key-change-me")
        self.ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))
        self.JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")

        # Rooms
        self.ROOM_CODE_LENGTH: int = int(os.getenv("ROOM_CODE_LENGTH", "6"))
        self.DEFAULT_MAX_MEMBERS: int = int(os.getenv("DEFAULT_MAX_MEMBERS", "50"))

        # Messages pagination
        self.DEFAULT_PAGE_LIMIT: int = int(os.getenv("DEFAULT_PAGE_LIMIT", "50"))

        # App Settings
        self.APP_NAME: str = os.getenv("APP_NAME", "Salons Chat API")
        self.APP_VERSION: str = os.getenv("APP_VERSION", "1.0.0")
        self.DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"
        self.PORT: int = int(os.getenv("PORT", "8000"))

        # CORS Settings
        cors_origins = os.getenv("ALLOWED_ORIGINS", "*")
        if cors_origins == "*":
            self.ALLOWED_ORIGINS = ["*"]
        else:
            self.ALLOWED_ORIGINS = [origin.strip() for origin in cors_origins.split(",")]

    def _validate_mongodb_url(self):
        """Validate the MongoDB URL scheme."""
        if not (self.MONGODB_URL.startswith("mongodb://") or self.MONGODB_URL.startswith("mongodb+srv://")):
            raise ValueError(f"Invalid MongoDB URL scheme: {self.masked_mongodb_url}")

    @property
    def masked_mongodb_url(self) -> str:
        """MongoDB URL with credentials hidden, safe for logs"""
        url = self.MONGODB_URL
        if "@" not in url:
            return url
        scheme, _, rest = url.partition("://")
        return f"{scheme}://***:***@{rest.split('@', 1)[1]}"

# Create settings instance
settings = Settings()
