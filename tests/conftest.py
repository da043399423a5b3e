import httpx
import pytest


def story_body(story_id: int, by: str = None, title: str = None, url: str = None) -> str:
    """Upstream-shaped item JSON, with the irregular spacing upstream may send."""
    by = by or f"user{story_id}"
    title = title or f"Story {story_id}"
    url = url if url is not None else f"https://example.com/{story_id}"
    return (
        f'{{"by":"{by}", "id":{story_id},"kids": [],"score":1,'
        f'"title":"{title}","type":"story","url":"{url}"}}'
    )


class FakeUpstream:
    """Stands in for the Hacker News API behind an httpx.MockTransport."""

    def __init__(self):
        self.ids: list = []
        self.items: dict[str, str] = {}
        self.list_status = 200
        self.list_body = None
        self.item_errors: dict[str, Exception] = {}
        self.requests: list[httpx.Request] = []

    def add(self, story_id, body: str | None = None) -> str:
        body = body if body is not None else story_body(story_id)
        self.ids.append(story_id)
        self.items[str(story_id)] = body
        return body

    def add_missing(self, story_id) -> None:
        self.ids.append(story_id)

    def item_paths(self) -> list[str]:
        return [r.url.path for r in self.requests if "/item/" in r.url.path]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.endswith("/newstories.json"):
            if self.list_status != 200:
                return httpx.Response(self.list_status, text="null")
            return httpx.Response(200, json=self.ids if self.list_body is None else self.list_body)

        story_id = path.rsplit("/", 1)[-1].removesuffix(".json")
        if story_id in self.item_errors:
            raise self.item_errors[story_id]
        if story_id in self.items:
            return httpx.Response(200, text=self.items[story_id])
        return httpx.Response(404, text="null")

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handle))


@pytest.fixture
def upstream():
    return FakeUpstream()
