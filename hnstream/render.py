from hnstream.models import StoryRecord

ARTICLE_TEMPLATE = """
  <article class='hn-article'>
    <h2> {by} </h2>
    <h3>{title}</h3>
    <a href="{url}">{url}</a>
  </article>
  """


def htmlify(body: str) -> str:
    """Render an upstream item body as an HTML article fragment."""
    story = StoryRecord.from_json(body)
    return ARTICLE_TEMPLATE.format(by=story.by, title=story.title, url=story.url)
