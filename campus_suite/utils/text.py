"""Text utilities for notification and email bodies."""
import html
import re


def sanitize_text(text: str) -> str:
    """Clean and normalize text for storage and delivery.

    Removes control characters that could break JSON or SMTP payloads while
    keeping newlines, and trims every line.

    Examples:
        >>> sanitize_text("  Dear Ama,\\x07\\n\\n\\n\\nApproved ")
        'Dear Ama,\\n\\nApproved'
        >>> sanitize_text(None)
        ''
    """
    if text is None:
        return ""

    text = str(text)

    # Keep \t, \n and \r
    text = re.sub(r'[\x00-\x08\x0B-\x0C\x0E-\x1F\x7F-\x9F]', '', text)
    text = re.sub(r'[ \t]+', ' ', text)
    text = re.sub(r'\n{3,}', '\n\n', text)

    lines = [line.strip() for line in text.split('\n')]
    return '\n'.join(lines).strip()


def text_to_html(text: str) -> str:
    """Render plain text as HTML paragraphs, one per line.

    Blank lines become ``<br>`` so paragraph spacing survives.
    """
    parts = []
    for line in sanitize_text(text).split('\n'):
        if not line:
            parts.append('<br>')
        else:
            parts.append(f'<p style="margin: 10px 0; line-height: 1.6;">{html.escape(line)}</p>')
    return ''.join(parts)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()
