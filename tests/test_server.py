"""Tests for server module."""

from dataclasses import replace
from typing import Any

import pytest
from learnstage.app_keys import renderer_key, revalidate_key, source_key
from learnstage.config import Config, GraphQLConfig
from learnstage.content.graphql import GraphQLContentSource
from learnstage.content.local import FileContentSource
from learnstage.server import create_app, http_client_key


class TestCreateApp:
    """Tests for create_app()."""

    def test__local_config__uses_file_source(self, test_config: Config) -> None:
        """Create app backed by the local content tree."""
        app = create_app(test_config)

        assert isinstance(app[source_key], FileContentSource)
        assert app[source_key].content_dir == test_config.content.content_dir
        assert app[source_key].page_size == 2
        assert renderer_key in app
        assert app[revalidate_key] == 300
        assert http_client_key not in app

    @pytest.mark.asyncio
    async def test__graphql_config__uses_api_source(
        self, aiohttp_client: Any, test_config: Config
    ) -> None:
        """Create app backed by the content API and close its client on cleanup."""
        content = replace(
            test_config.content,
            source="graphql",
            graphql=GraphQLConfig(url="https://cms.example.com/gql", token="t"),
        )
        app = create_app(replace(test_config, content=content))

        assert isinstance(app[source_key], GraphQLContentSource)
        assert app[source_key].url == "https://cms.example.com/gql"
        assert app[source_key].token == "t"

        client = await aiohttp_client(app)
        await client.close()

        assert app[http_client_key].is_closed
