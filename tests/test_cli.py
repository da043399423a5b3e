import io
import json
from unittest.mock import AsyncMock, patch

import pytest

from hnstream.cli import main, parse_args, write_stories
from hnstream.config import DEFAULT_CONFIG
from hnstream.errors import FatalFetchError
from hnstream.stream import create_story_stream


class TestParseArgs:
    def test_defaults(self):
        args = parse_args([])
        assert args.max_stories == 10
        assert args.output == "html"

    def test_flags(self):
        args = parse_args(["--max", "3", "--output", "json"])
        assert args.max_stories == 3
        assert args.output == "json"


class TestWriteStories:
    @pytest.mark.asyncio
    async def test_writes_chunks(self, upstream):
        body = upstream.add(1)
        upstream.add(2)
        out = io.StringIO()

        async with upstream.client() as client:
            with patch(
                "hnstream.cli.create_story_stream",
                lambda max_stories, output, config: create_story_stream(
                    max_stories, output, client=client, config=config
                ),
            ):
                await write_stories(1, "json", DEFAULT_CONFIG, out=out)

        assert json.loads(out.getvalue()) == [json.loads(body)]


class TestMain:
    def test_bad_output_exit_code(self):
        assert main(["--output", "xml"]) == 2

    def test_bad_max_exit_code(self):
        assert main(["--max", "0"]) == 2

    def test_bad_env_exit_code(self, monkeypatch):
        monkeypatch.setenv("HTTP_TIMEOUT", "never")
        assert main([]) == 2

    @patch("hnstream.cli.write_stories", new_callable=AsyncMock)
    def test_stream_error_exit_code(self, mock_write):
        mock_write.side_effect = FatalFetchError("https://example.com/newstories.json", 500)
        assert main(["--max", "2"]) == 1

    @patch("hnstream.cli.write_stories", new_callable=AsyncMock)
    def test_success(self, mock_write, monkeypatch):
        monkeypatch.delenv("HN_API_BASE", raising=False)
        monkeypatch.delenv("HTTP_TIMEOUT", raising=False)

        assert main(["--max", "4", "--output", "JSON"]) == 0

        mock_write.assert_called_once_with(4, "JSON", DEFAULT_CONFIG)
