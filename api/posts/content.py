"""
Content pipeline for incoming posts.

Order on create:
1. slug: explicit value, or derived from the title
2. content: HTML allow-list sanitization
3. excerpt: explicit value, or plain-text preview of the sanitized content

On update only the steps whose input fields are present run. Everything here
is pure: no I/O, same input gives the same output.
"""

from __future__ import annotations

import re
from typing import Any

import nh3
from slugify import slugify

from .schemas import InsertPost, UpdatePost

EXCERPT_MAX_CHARS = 150
EXCERPT_ELLIPSIS = "..."

ALLOWED_TAGS = {
    "h1", "h2", "h3", "h4", "h5", "h6",
    "p", "br", "strong", "em", "u", "strike",
    "ul", "ol", "li",
    "blockquote", "pre", "code",
    "a", "img",
    "div", "span",
}

ALLOWED_ATTRIBUTES = {
    "a": {"href", "target"},
    "img": {"src", "alt", "width", "height"},
    "*": {"class", "style"},
}

# Dropped together with everything inside them.
CONTENT_DROPPING_TAGS = {"script", "style"}

_TAG_RE = re.compile(r"<[^>]*>")


class SlugDerivationError(ValueError):
    pass


def slugify_title(title: str) -> str:
    """
    Lowercase ASCII slug: transliterated, non-alphanumeric runs collapsed to `-`.
    """
    slug = slugify(title or "")
    if not slug:
        raise SlugDerivationError("Could not derive a slug from the title.")
    return slug


def sanitize_content(html: str) -> str:
    """
    Strip everything outside the allow-list. Never raises on bad markup.
    """
    return nh3.clean(
        html or "",
        tags=ALLOWED_TAGS,
        clean_content_tags=CONTENT_DROPPING_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        link_rel=None,
        strip_comments=True,
    )


def derive_excerpt(html: str) -> str:
    text = _TAG_RE.sub("", html or "")
    if len(text) > EXCERPT_MAX_CHARS:
        return text[:EXCERPT_MAX_CHARS] + EXCERPT_ELLIPSIS
    return text


def prepare_insert(payload: InsertPost) -> dict[str, Any]:
    slug = payload.slug if payload.slug is not None else slugify_title(payload.title)
    content = sanitize_content(payload.content)
    excerpt = payload.excerpt if payload.excerpt is not None else derive_excerpt(content)
    return {
        "title": payload.title,
        "slug": slug,
        "content": content,
        "excerpt": excerpt,
        "published": payload.published,
    }


def prepare_update(payload: UpdatePost) -> dict[str, Any]:
    fields = payload.model_dump(exclude_unset=True)
    # A null excerpt means "not supplied"; the column is never cleared.
    if "excerpt" in fields and fields["excerpt"] is None:
        del fields["excerpt"]

    if "title" in fields and "slug" not in fields:
        fields["slug"] = slugify_title(fields["title"])

    if "content" in fields:
        fields["content"] = sanitize_content(fields["content"])
        if "excerpt" not in fields:
            fields["excerpt"] = derive_excerpt(fields["content"])

    return fields
