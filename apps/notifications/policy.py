"""
Content policy for admin notification emails.

Pure helpers used by the mailers in services.py:

- Sanitizing: comment HTML is reduced to an allowlist of tags, attributes
  and URL schemes before it is stored or emailed.
- Image safety mode: for comment parents listed in
  PARENTS_WITH_IMAGE_SAFETY_MODE, embedded images are replaced by their URL
  so admins never load third-party images by opening an email.
- Spam report aggregation: turns the raw per-user spam report into the
  sections listed in the spam alert, dropping users that no longer exist.

Nothing here reads settings or the database directly. Callers pass the
safety configuration and the lookup functions in.
"""

import re
from dataclasses import dataclass, field
from typing import Callable, Iterable, Mapping, Optional

import bleach
from bs4 import BeautifulSoup, NavigableString

BLOCK_TAGS = ['p', 'div', 'blockquote', 'li', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6']

# Markup allowed in comments
ALLOWED_TAGS = {
    'a', 'abbr', 'b', 'big', 'blockquote', 'br', 'cite', 'code', 'del', 'div',
    'em', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'hr', 'i', 'img', 'ins', 'li',
    'ol', 'p', 'pre', 'q', 's', 'small', 'span', 'strike', 'strong', 'sub',
    'sup', 'u', 'ul',
}

ALLOWED_ATTRIBUTES = {
    '*': ['class', 'title'],
    'a': ['href', 'name'],
    'img': ['src', 'alt', 'title', 'width', 'height'],
}

# Relative URLs carry no scheme and are always kept
ALLOWED_PROTOCOLS = {'http', 'https', 'mailto'}


# =============================================================================
# SANITIZING
# =============================================================================

def sanitize_html(content: str) -> str:
    """
    Clean user-supplied comment HTML.

    Tags outside ALLOWED_TAGS are stripped (their text is kept), event
    handler and other unlisted attributes are dropped, and links or image
    sources using schemes such as javascript: lose the attribute.
    Running it on its own output changes nothing.
    """
    if not content:
        return ''

    return bleach.clean(
        content,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
        strip_comments=True,
    )


# =============================================================================
# IMAGE SAFETY MODE
# =============================================================================

@dataclass(frozen=True)
class ImageSafetyMode:
    """Set of comment parent types whose images are shown as plain URLs."""

    categories: frozenset = field(default_factory=frozenset)

    @classmethod
    def from_setting(cls, value: Optional[Iterable[str]]) -> 'ImageSafetyMode':
        """
        Build from the PARENTS_WITH_IMAGE_SAFETY_MODE setting.

        None, an empty list and blank entries all mean "nothing protected".
        """
        if not value:
            return cls()
        if isinstance(value, str):
            value = value.split(',')
        return cls(frozenset(item.strip() for item in value if item and item.strip()))

    def __contains__(self, category):
        return category in self.categories

    def __bool__(self):
        return bool(self.categories)


def _image_source(tag):
    src = tag.get('src')
    if isinstance(src, str) and src.strip():
        return src.strip()
    return None


def filter_images(content: str, category: Optional[str], config: Optional[ImageSafetyMode]) -> str:
    """
    Replace embedded images with their URL when `category` is protected.

    Args:
        content: Sanitized HTML fragment
        category: Parent type of the content, e.g. "AdminPost"
        config: Categories with image safety mode on (None means none)

    Returns:
        str: The fragment with each <img src="..."> swapped for its src as
        text, or `content` unchanged when the category is not protected.
        Images without a src are left alone.
    """
    if not content or config is None or category not in config:
        return content

    soup = BeautifulSoup(content, 'html.parser')
    images = [img for img in soup.find_all('img') if _image_source(img)]
    if not images:
        return content

    for img in images:
        img.replace_with(NavigableString(_image_source(img)))
    return str(soup)


def html_to_text(content: str) -> str:
    """
    Plain-text rendering of an HTML fragment for text/plain email parts.

    Markup is dropped entirely, images included. Line and paragraph breaks
    survive as newlines.
    """
    if not content:
        return ''

    soup = BeautifulSoup(content, 'html.parser')
    for br in soup.find_all('br'):
        br.replace_with('\n')
    for block in soup.find_all(BLOCK_TAGS):
        block.append('\n\n')

    text = soup.get_text()
    text = re.sub(r'[ \t]+\n', '\n', text)
    text = re.sub(r'\n{3,}', '\n\n', text)
    return text.strip()


def text_variant(content: str, category: Optional[str], config: Optional[ImageSafetyMode]) -> str:
    """Text rendering of `content`: image URLs appear only for protected categories."""
    return html_to_text(filter_images(content, category, config))


# =============================================================================
# SPAM REPORT
# =============================================================================

@dataclass(frozen=True)
class SpamReportEntry:
    user_id: object
    score: int
    work_ids: tuple

    @classmethod
    def coerce(cls, user_id, value) -> 'SpamReportEntry':
        """Accept either an entry or the {"score": .., "work_ids": [..]} dict form."""
        if isinstance(value, cls):
            return value
        return cls(
            user_id=user_id,
            score=value.get('score', 0),
            work_ids=tuple(value.get('work_ids') or ()),
        )


@dataclass(frozen=True)
class SpamSection:
    """One user's block in the spam alert."""

    user: str
    score: int
    titles: tuple


UserResolver = Callable[[object], Optional[str]]
ItemTitleResolver = Callable[[object], Optional[str]]


def aggregate_spam_report(
    report: Mapping,
    resolve_user: UserResolver,
    resolve_item_title: ItemTitleResolver,
) -> list:
    """
    Build the spam alert sections from a report.

    Args:
        report: Ordered mapping of user id to entry; its order is kept
        resolve_user: Returns the display name for a user id, or None if
            the user no longer exists
        resolve_item_title: Returns the title for a work id, or None if the
            work no longer exists

    Returns:
        list[SpamSection]: One section per surviving user, in report order.
        Missing users are skipped without a trace; missing works are left
        out of their user's titles. An empty list means nothing to send.
    """
    sections = []
    for user_id, value in report.items():
        entry = SpamReportEntry.coerce(user_id, value)

        user = resolve_user(entry.user_id)
        if user is None:
            continue

        titles = []
        for work_id in entry.work_ids:
            title = resolve_item_title(work_id)
            if title is not None:
                titles.append(title)

        sections.append(SpamSection(user=user, score=entry.score, titles=tuple(titles)))
    return sections
