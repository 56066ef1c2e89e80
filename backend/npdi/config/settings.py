"""Application Settings - Central Configuration"""
from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )
    
    # MongoDB
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "npdi_dev"
    
    # Logging
    logs_path: str = "./logs"
    log_level: str = "INFO"
    
    # CORS - set to "*" to allow all origins
    cors_origins: str = "*"
    
    # Template / form configuration cache
    template_cache_ttl_seconds: int = 300
    template_cache_max_entries: int = 100
    
    # Submission validation
    # Bare requirement keys (no ".") are retried under these prefixes, in order
    legacy_prefix_fallback_enabled: bool = True
    legacy_field_prefixes: str = (
        "pricingData,chemicalProperties,corpbaseData,hazardClassification,"
        "regulatoryInfo,launchTimeline,businessJustification,vendorInformation"
    )
    # When False, requirements on fields hidden for the ticket are not enforced
    enforce_hidden_requirements: bool = False
    
    # Environment
    environment: str = "development"
    debug: bool = True
    
    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins string to list"""
        return [origin.strip() for origin in self.cors_origins.split(",")]
    
    @property
    def legacy_field_prefixes_list(self) -> List[str]:
        """Parse legacy prefix string to an ordered list"""
        return [prefix.strip() for prefix in self.legacy_field_prefixes.split(",") if prefix.strip()]
    
    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.environment.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
