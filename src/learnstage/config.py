"""Configuration management for Learnstage.

Supports TOML configuration format with auto-discovery.
"""

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

CONFIG_FILENAME = "learnstage.toml"

CONTENT_SOURCES = ("local", "graphql")


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080
    revalidate: int = 300


@dataclass
class GraphQLConfig:
    """Content API configuration."""

    url: str
    token: str | None = None


@dataclass
class ContentConfig:
    """Content source configuration."""

    source: str = "local"
    content_dir: Path = field(default_factory=lambda: Path("."))
    page_size: int = 50
    graphql: GraphQLConfig | None = None


@dataclass
class BuildConfig:
    """Static build configuration."""

    output_dir: Path = field(default_factory=lambda: Path("dist"))


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    content: ContentConfig
    build: BuildConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for learnstage.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents."""
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> "Config":
        return cls(
            server=ServerConfig(),
            content=ContentConfig(),
            build=BuildConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            data = tomllib.load(f)

        config_dir = path.parent

        return cls(
            server=cls._parse_server(data.get("server")),
            content=cls._parse_content(data.get("content"), config_dir),
            build=cls._parse_build(data.get("build"), config_dir),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        """Parse server configuration section.

        Args:
            data: Raw server section data

        Returns:
            ServerConfig instance
        """
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        revalidate = data.get("revalidate", 300)
        if not isinstance(revalidate, int) or isinstance(revalidate, bool):
            raise ValueError("server.revalidate must be an integer")
        if revalidate < 0:
            raise ValueError("server.revalidate must not be negative")

        return ServerConfig(host=host, port=port, revalidate=revalidate)

    @classmethod
    def _parse_content(cls, data: object, config_dir: Path) -> ContentConfig:
        """Parse content configuration section.

        Args:
            data: Raw content section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            ContentConfig instance
        """
        if data is None:
            return ContentConfig(content_dir=config_dir)

        if not isinstance(data, dict):
            raise ValueError("content section must be a dictionary")

        source = data.get("source", "local")
        if source not in CONTENT_SOURCES:
            raise ValueError(f"content.source must be one of: {', '.join(CONTENT_SOURCES)}")

        content_dir = data.get("content_dir", ".")
        if not isinstance(content_dir, str):
            raise ValueError("content.content_dir must be a string")

        page_size = data.get("page_size", 50)
        if not isinstance(page_size, int) or isinstance(page_size, bool):
            raise ValueError("content.page_size must be an integer")
        if page_size < 1:
            raise ValueError("content.page_size must be at least 1")

        graphql = cls._parse_graphql(data.get("graphql"))
        if source == "graphql" and graphql is None:
            raise ValueError("content.graphql.url is required for the graphql source")

        return ContentConfig(
            source=source,
            content_dir=config_dir / content_dir,
            page_size=page_size,
            graphql=graphql,
        )

    @classmethod
    def _parse_graphql(cls, data: object) -> GraphQLConfig | None:
        """Parse content.graphql configuration section.

        Returns:
            GraphQLConfig instance or None if section not present
        """
        if data is None:
            return None

        if not isinstance(data, dict):
            raise ValueError("content.graphql section must be a dictionary")

        url = data.get("url")
        if url is None:
            return None
        if not isinstance(url, str):
            raise ValueError("content.graphql.url must be a string")

        token = data.get("token")
        if token is not None and not isinstance(token, str):
            raise ValueError("content.graphql.token must be a string")

        return GraphQLConfig(url=url, token=token)

    @classmethod
    def _parse_build(cls, data: object, config_dir: Path) -> BuildConfig:
        if data is None:
            return BuildConfig(output_dir=config_dir / "dist")

        if not isinstance(data, dict):
            raise ValueError("build section must be a dictionary")

        output_dir = data.get("output_dir", "dist")
        if not isinstance(output_dir, str):
            raise ValueError("build.output_dir must be a string")

        return BuildConfig(output_dir=config_dir / output_dir)

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        content_dir: Path | None = None,
        output_dir: Path | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            host: Override server.host
            port: Override server.port
            content_dir: Override content.content_dir (also selects the local source)
            output_dir: Override build.output_dir

        Returns:
            New Config instance with overrides applied
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        content = self.content
        if content_dir is not None:
            content = replace(self.content, source="local", content_dir=content_dir)

        build = self.build
        if output_dir is not None:
            build = replace(self.build, output_dir=output_dir)

        return replace(self, server=server, content=content, build=build)
