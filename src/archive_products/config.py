"""Configuration loader for archive_products."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from common.config import find_config_path, load_yaml

CONFIG_DIR = Path(__file__).parent / "configs"

DEFAULT_FEED_URL = "https://www.metoc.navy.mil/jtwc/rss/jtwc.rss"
DEFAULT_USER_AGENT = "jtwc-archiver/1.0 (+product archival)"


@dataclass
class ProxyConfig:
    host: str
    port: int


@dataclass
class TransportConfig:
    """Settings applied to every outbound request."""
    timeout: int = 30
    headers: dict[str, str] = field(default_factory=lambda: {"User-Agent": DEFAULT_USER_AGENT})
    proxy: Optional[ProxyConfig] = None


@dataclass
class StorageConfig:
    backend: str = "local"  # "local" or "s3"
    local_path: str = "."
    s3_prefix: str = ""


@dataclass
class ArchiveConfig:
    feed_url: str = DEFAULT_FEED_URL
    snapshot_name: str = "jtwc.rss"
    archive_dir: str = "jtwc_products"
    retention_days: int = 180
    max_workers: int = 1
    categories: list[str] = field(default_factory=lambda: ["text", "gif", "prog", "jmv"])
    storage: StorageConfig = field(default_factory=StorageConfig)
    transport: TransportConfig = field(default_factory=TransportConfig)


def load_config(config_name: str | None = None) -> ArchiveConfig:
    """Load configuration from YAML file.

    Args:
        config_name: Name of config file (without .yaml extension) or a path
                    to a YAML file. If None, uses CONFIG_ENV env var or "prod".

    Returns:
        Loaded ArchiveConfig object
    """
    config_path = find_config_path(config_name, CONFIG_DIR, env_var="CONFIG_ENV")
    return parse_config(load_yaml(config_path))


def parse_config(data: dict) -> ArchiveConfig:
    """Parse config dictionary into ArchiveConfig object."""
    defaults = ArchiveConfig()

    storage_data = data.get("storage") or {}
    storage = StorageConfig(
        backend=storage_data.get("backend", "local"),
        local_path=str(storage_data.get("local_path", ".")),
        s3_prefix=storage_data.get("s3_prefix", ""),
    )
    if storage.backend not in ("local", "s3"):
        raise ValueError(f"Unknown storage backend: {storage.backend}")

    transport_data = data.get("transport") or {}
    proxy_data = transport_data.get("proxy")
    proxy = None
    if proxy_data:
        proxy = ProxyConfig(host=proxy_data["host"], port=int(proxy_data["port"]))

    headers = transport_data.get("headers")
    transport = TransportConfig(
        timeout=int(transport_data.get("timeout", 30)),
        headers={str(k): str(v) for k, v in headers.items()} if headers else TransportConfig().headers,
        proxy=proxy,
    )

    return ArchiveConfig(
        feed_url=data.get("feed_url", defaults.feed_url),
        snapshot_name=data.get("snapshot_name", defaults.snapshot_name),
        archive_dir=data.get("archive_dir", defaults.archive_dir),
        retention_days=int(data.get("retention_days", defaults.retention_days)),
        max_workers=max(1, int(data.get("max_workers", defaults.max_workers))),
        categories=list(data.get("categories") or defaults.categories),
        storage=storage,
        transport=transport,
    )
