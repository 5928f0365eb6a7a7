"""
Configuration management for VidRelay.
"""
import os


class Settings:
    """Application settings with environment variable support."""
    
    # Server
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "4000"))
    
    # Optional shared secret gating the download endpoint (empty disables the check)
    api_key: str = os.getenv("API_KEY", "")
    
    # Upstream services
    noembed_api_url: str = os.getenv("NOEMBED_API_URL", "https://noembed.com/embed")
    tiktok_api_url: str = os.getenv("TIKTOK_API_URL", "https://www.tikwm.com/api/")
    youtube_loader_url: str = os.getenv("YOUTUBE_LOADER_URL", "https://loader.to/api/download/")
    facebook_loader_url: str = os.getenv("FACEBOOK_LOADER_URL", "https://getmyfb.com/process/")
    
    # Upstream timeouts (in seconds)
    metadata_timeout: float = float(os.getenv("METADATA_TIMEOUT", "8"))
    tiktok_timeout: float = float(os.getenv("TIKTOK_TIMEOUT", "10"))
    stream_timeout: float = float(os.getenv("STREAM_TIMEOUT", "30"))
    
    # Frontend build served as the single-page app fallback
    static_dir: str = os.getenv("STATIC_DIR", "frontend/dist")
    
    # CORS
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")
    
    # Application settings
    environment: str = os.getenv("ENVIRONMENT", os.getenv("NODE_ENV", "development"))
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    
    @property
    def api_key_required(self) -> bool:
        return bool(self.api_key)
    
    @property
    def cors_origin_list(self) -> list:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


# Global settings instance
settings = Settings()
