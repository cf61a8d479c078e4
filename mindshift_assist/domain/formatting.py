def format_ai_response(content: str) -> str:
    # # Drop surrounding whitespace and wrapping quotes until stable so a second pass is a no-op
    text = (content or "").strip()
    while True:
        trimmed = text.strip('"').strip()
        if trimmed == text:
            return text
        text = trimmed
