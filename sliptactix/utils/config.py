"""Configuration management"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any
from dotenv import load_dotenv
from sliptactix.utils.logging import get_logger

load_dotenv()

logger = get_logger("utils.config")

DEFAULT_GROK_API_URL = "https://api.x.ai/v1"


class Config:
    """Configuration manager"""

    def __init__(self, config_path: str = "config/config.yaml"):
        """Initialize configuration"""
        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        """Load configuration from YAML file"""
        if self.config_path.exists():
            with open(self.config_path, 'r') as f:
                self._config = yaml.safe_load(f) or {}
        else:
            self._config = {}

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation"""
        keys = key.split('.')
        value = self._config
        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default
        return value

    def get_sports_api_key(self) -> str:
        """Get the Sports Games Odds API key"""
        return os.getenv('SPORTS_API_KEY', '').strip()

    def get_grok_api_key(self) -> str:
        """Get the xAI key, accepting either of the two env var names"""
        return (os.getenv('GROK_API_KEY') or os.getenv('XAI_API_KEY') or '').strip()

    def get_grok_key_source(self) -> str:
        """Name of the env var the xAI key came from"""
        if os.getenv('GROK_API_KEY'):
            return 'GROK_API_KEY'
        if os.getenv('XAI_API_KEY'):
            return 'XAI_API_KEY'
        return 'none'

    def get_grok_api_url(self) -> str:
        """Get the xAI API base URL"""
        url = os.getenv('GROK_API_URL') or self.get('llm.base_url', DEFAULT_GROK_API_URL)
        # Older deployments configured the full chat completions endpoint
        suffix = '/chat/completions'
        if url.endswith(suffix):
            url = url[:-len(suffix)]
        return url

    def get_llm_model(self) -> str:
        """Get the Grok model name"""
        model_name = os.getenv('GROK_MODEL') or self.get('llm.model', 'grok-3-mini')
        logger.debug(f"Grok model: '{model_name}'")
        return model_name

    def get_database_url(self) -> str:
        """Get database URL from environment or config"""
        return os.getenv('DATABASE_URL', 'sqlite:///data/db/sliptactix.db')

    def get_log_level(self) -> str:
        """Get log level"""
        return os.getenv('LOG_LEVEL', 'INFO')

    def is_debug_mode(self) -> bool:
        """Check if debug mode is enabled"""
        return os.getenv('DEBUG', '').lower() in ('true', '1', 'yes') or self.get('debug', False)

    def get_cache_ttl(self) -> int:
        """Get cache TTL in seconds"""
        return int(self.get('cache.ttl_seconds', 300))

    def get_request_timeout(self) -> int:
        """Get outbound HTTP timeout in seconds"""
        return int(self.get('http.timeout_seconds', 15))

    def get_sync_config(self) -> Dict[str, Any]:
        """Get data sync configuration"""
        return self.get('sync', {}) or {}

    def get_chat_config(self) -> Dict[str, Any]:
        """Get chat endpoint configuration"""
        return self.get('chat', {}) or {}

    def get_timezone(self) -> str:
        """Timezone the NBA slate and the sync schedule are reckoned in"""
        return self.get('scheduler.timezone', 'America/New_York')


config = Config()
