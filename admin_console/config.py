"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings
from typing import List, Optional


class ConsoleConfig(BaseSettings):
    """Admin console configuration"""
    
    # Backend API configuration
    api_base_url: str = "http://localhost:8080"
    api_timeout: float = 15.0
    
    # List view configuration
    default_page_size: int = 10
    page_size_options: List[int] = [5, 10, 20, 50]
    page_window: int = 5  # Number of page buttons shown at once
    
    # Business rules configuration
    max_topup_amount: str = "10000000"  # 1,00,00,000
    
    # Session configuration
    token_claim_admin_id: str = "admin_id"
    token_claim_name: str = "name"
    
    # Console service configuration
    dashboard_host: str = "127.0.0.1"
    dashboard_port: int = 8893
    
    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    log_file: Optional[str] = None  # If None, logs to stdout
    
    class Config:
        env_prefix = "CONSOLE_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = ConsoleConfig()


def get_config() -> ConsoleConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> ConsoleConfig:
    """Reload configuration from environment"""
    global config
    config = ConsoleConfig()
    return config
