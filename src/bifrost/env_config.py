import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Union

from bifrost import DEFAULT_ENV_CONFIG_FILE_PATH
from bifrost.endpoint import Endpoint, Header, Method


@dataclass
class Environment:
    name: str
    base_url: str
    headers: Dict[str, str] = field(default_factory=dict)
    timeout: Optional[float] = None

    def endpoint(self, path: Optional[str] = None, method: Method = Method.GET) -> Endpoint:
        """Create an endpoint against this environment, carrying its default headers."""
        headers = tuple(Header(key, value) for key, value in self.headers.items())
        return Endpoint(base_url=self.base_url, method=method, path=path, headers=headers)


@dataclass
class BifrostEnvConfig:
    environments: dict = field(default_factory=dict)
    default_environment: Optional[str] = None


def load_bifrost_env_config(path: Union[str, Path] = DEFAULT_ENV_CONFIG_FILE_PATH) -> BifrostEnvConfig:
    """Load config from JSON file. Returns empty config if file doesn't exist."""
    expanded = Path(path).expanduser()
    if not expanded.exists():
        return BifrostEnvConfig()

    data = json.loads(expanded.read_text())

    environments = {}
    for name, env_data in data.get("environments", {}).items():
        timeout = env_data.get("timeout")
        environments[name] = Environment(
            name=name,
            base_url=env_data["base_url"],
            headers=dict(env_data.get("headers", {})),
            timeout=float(timeout) if timeout is not None else None,
        )

    return BifrostEnvConfig(
        environments=environments,
        default_environment=data.get("default_environment"),
    )


def get_environment(config: BifrostEnvConfig, env_name: Optional[str] = None) -> Environment:
    """Look up ``env_name``, falling back to the configured default_environment."""
    env_name = env_name or config.default_environment
    if not env_name:
        raise ValueError("No environment given and no default_environment is configured")
    if env_name not in config.environments:
        raise ValueError(f"Unknown environment: {env_name}")
    return config.environments[env_name]

