"""Identifiers and paths of the sample content tree."""

from __future__ import annotations

PAGE_ID = "11111111-1111-1111-1111-111111111111"
HEADER_ID = "22222222-2222-2222-2222-222222222222"
BODY_ID = "33333333-3333-3333-3333-333333333333"
AUTHOR_ID = "44444444-4444-4444-4444-444444444444"
TEMPLATE_ID = "55555555-5555-5555-5555-555555555555"
DRAFT_ID = "66666666-6666-6666-6666-666666666666"

PAGE_PATH = "/sitecore/content/Site/Home/Article"
