"""Query-driven section selection for long policy documents."""

import re

from nexusone.app.policies.keywords import DEFAULT_KEYWORDS, PolicyKeywords

# Returned when no section of the document matches the query
FALLBACK_CHARS = 2000

_UPPERCASE_HEADER = re.compile(r"[A-Z\s\d.\-:]+")
_NUMBERED_HEADER = re.compile(r"\d+\.")
_TITLE_HEADER = re.compile(r"[A-Z][a-z\s]+")


def is_header_line(line: str) -> bool:
    """Guess whether a stripped line starts a new document section.

    A header is shorter than 80 characters and is either all caps/digits/
    punctuation, a short label ending in or containing a colon, a numbered
    heading such as "3. Leave", or a single capitalised run of words.
    """
    if len(line) >= 80:
        return False

    return bool(
        _UPPERCASE_HEADER.fullmatch(line)
        or (":" in line and len(line) < 50)
        or _NUMBERED_HEADER.match(line)
        or _TITLE_HEADER.fullmatch(line)
    )


def section_keywords(query: str, keywords: PolicyKeywords = DEFAULT_KEYWORDS) -> list[str]:
    """Collect section keywords for every trigger found in the query."""
    query_lower = query.lower()
    selected: list[str] = []

    for trigger, words in keywords.section_triggers.items():
        if trigger in query_lower:
            selected.extend(words)

    return selected


def select_relevant_section(
    full_text: str, query: str, keywords: PolicyKeywords = DEFAULT_KEYWORDS
) -> str:
    """Keep only the blocks of a document that relate to the query.

    The text is split into blocks at header-like lines. A block is kept when
    its header or any of its lines mentions one of the query's section
    keywords. Kept blocks are joined by a blank line.

    Args:
        full_text: Extracted document text
        query: User query used to pick section keywords
        keywords: Keyword tables

    Returns:
        Relevant blocks, or the first FALLBACK_CHARS characters of the
        document when nothing matches
    """
    words = section_keywords(query, keywords)

    def mentions_keyword(line: str) -> bool:
        line_lower = line.lower()
        return any(word in line_lower for word in words)

    sections: list[str] = []
    current: list[str] = []
    relevant = False

    for raw_line in full_text.split("\n"):
        line = raw_line.strip()

        if is_header_line(line):
            if relevant and current:
                sections.append("\n".join(current))
            relevant = mentions_keyword(line)
            current = [line]
        elif line:
            current.append(line)
            if not relevant:
                relevant = mentions_keyword(line)

    if relevant and current:
        sections.append("\n".join(current))

    if sections:
        return "\n\n".join(sections)

    return full_text[:FALLBACK_CHARS]
