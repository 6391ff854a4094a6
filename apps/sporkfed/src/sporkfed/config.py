"""Process settings and rule configuration."""

import os

import httpx
import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError

from gh import GitHubClient, is_not_found

from .exceptions import ConfigError
from .log import get_logger
from .models import SporkfedConfig

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = ".github/sporkfed.yml"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000


class Settings(BaseModel):
    """Process settings."""

    github_token: str | None = None
    use_gh_cli: bool = False
    api_url: str | None = None
    webhook_secret: str | None = None
    config_path: str = DEFAULT_CONFIG_PATH
    max_retries: int = 3
    timeout: float = 30.0
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    @classmethod
    def from_env(cls, **overrides) -> "Settings":
        """Build settings from the environment (and a .env file, if any)."""
        load_dotenv()
        values = {
            "github_token": os.environ.get("GH_TOKEN") or os.environ.get("GITHUB_TOKEN"),
            "api_url": os.environ.get("GITHUB_API_URL"),
            "webhook_secret": os.environ.get("SPORKFED_WEBHOOK_SECRET"),
            "config_path": os.environ.get("SPORKFED_CONFIG_PATH", DEFAULT_CONFIG_PATH),
            "max_retries": os.environ.get("SPORKFED_MAX_RETRIES", 3),
            "timeout": os.environ.get("SPORKFED_TIMEOUT", 30.0),
            "host": os.environ.get("SPORKFED_HOST", DEFAULT_HOST),
            "port": os.environ.get("PORT", DEFAULT_PORT),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)

    def create_client(self) -> GitHubClient:
        return GitHubClient(
            token=self.github_token,
            use_gh_cli=self.use_gh_cli,
            base_url=self.api_url,
            timeout=self.timeout,
            max_retries=self.max_retries,
        )


async def load_config(
    client: GitHubClient,
    owner: str,
    repo: str,
    path: str = DEFAULT_CONFIG_PATH,
    ref: str | None = None,
) -> SporkfedConfig:
    """
    Load the rule configuration of a repository.

    A missing or empty file means no rules.

    Raises:
        ConfigError: The file exists but is not a valid configuration
    """
    try:
        config_file = await client.get_file_content(owner, repo, path, ref)
    except httpx.HTTPStatusError as e:
        if is_not_found(e):
            logger.info("config_not_found", repo=f"{owner}/{repo}", path=path)
            return SporkfedConfig()
        raise
    except ValueError as e:
        raise ConfigError(f"{path} in {owner}/{repo} is not a file") from e

    try:
        data = yaml.safe_load(config_file.content)
    except yaml.YAMLError as e:
        raise ConfigError(f"{path} in {owner}/{repo} is not valid YAML: {e}") from e

    if data is None:
        return SporkfedConfig()

    try:
        config = SporkfedConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"{path} in {owner}/{repo} is not a valid configuration: {e}") from e

    logger.info("load_config", repo=f"{owner}/{repo}", path=path, rules=len(config.rules))
    return config
