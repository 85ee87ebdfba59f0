from urllib.parse import urlsplit

from bs4 import BeautifulSoup, Comment

ALLOWED_TAGS = {
    "p", "br", "strong", "em", "u", "i", "b",
    "h1", "h2", "h3", "h4", "h5", "h6",
    "ul", "ol", "li",
    "a", "img",
    "blockquote", "pre", "code",
    "table", "thead", "tbody", "tr", "th", "td",
}
ALLOWED_ATTRIBUTES = {
    "a": {"href", "title", "target"},
    "img": {"src", "alt", "title", "width", "height"},
    "*": {"class", "id"},
}
ALLOWED_SCHEMES = {"http", "https", "mailto"}
ALLOWED_SCHEMES_BY_TAG = {"img": {"http", "https", "data"}}
URL_ATTRIBUTES = {"href", "src"}

# Dropped together with everything inside them
DISCARD_TAGS = {"script", "style", "iframe", "object", "embed", "noscript", "textarea"}


def _url_allowed(tag_name: str, url: str) -> bool:
    scheme = urlsplit(url.strip()).scheme.lower()
    if not scheme:
        # relative links and anchors
        return True
    return scheme in ALLOWED_SCHEMES_BY_TAG.get(tag_name, ALLOWED_SCHEMES)


def sanitize_html(html: str | None) -> str:
    """Reduce user supplied HTML to the blog allow-list.

    Disallowed tags are unwrapped so their text survives; attributes not on
    the list and URLs with a foreign scheme (javascript:, vbscript:, ...) are
    removed.
    """
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")

    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()

    for tag in soup.find_all(DISCARD_TAGS):
        if not tag.decomposed:
            tag.decompose()

    for tag in soup.find_all(True):
        if tag.name not in ALLOWED_TAGS:
            tag.unwrap()
            continue
        allowed = ALLOWED_ATTRIBUTES.get(tag.name, set()) | ALLOWED_ATTRIBUTES["*"]
        for attr in list(tag.attrs):
            if attr not in allowed:
                del tag.attrs[attr]
            elif attr in URL_ATTRIBUTES and not _url_allowed(tag.name, str(tag.attrs[attr])):
                del tag.attrs[attr]

    return str(soup)
