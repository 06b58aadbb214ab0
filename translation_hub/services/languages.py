"""Supported language catalogue and search."""

from translation_hub.schemas.tools import LanguageEntry

SUPPORTED_LANGUAGES: tuple[tuple[str, str], ...] = (
    ("af", "Afrikaans"), ("ar", "Arabic"), ("hy", "Armenian"), ("az", "Azerbaijani"),
    ("be", "Belarusian"), ("bs", "Bosnian"), ("bg", "Bulgarian"), ("ca", "Catalan"),
    ("zh", "Chinese"), ("hr", "Croatian"), ("cs", "Czech"), ("da", "Danish"),
    ("nl", "Dutch"), ("en", "English"), ("et", "Estonian"), ("fi", "Finnish"),
    ("fr", "French"), ("gl", "Galician"), ("de", "German"), ("el", "Greek"),
    ("he", "Hebrew"), ("hi", "Hindi"), ("hu", "Hungarian"), ("is", "Icelandic"),
    ("id", "Indonesian"), ("it", "Italian"), ("ja", "Japanese"), ("kn", "Kannada"),
    ("kk", "Kazakh"), ("ko", "Korean"), ("lv", "Latvian"), ("lt", "Lithuanian"),
    ("mk", "Macedonian"), ("ms", "Malay"), ("mr", "Marathi"), ("mi", "Maori"),
    ("ne", "Nepali"), ("no", "Norwegian"), ("fa", "Persian"), ("pl", "Polish"),
    ("pt", "Portuguese"), ("ro", "Romanian"), ("ru", "Russian"), ("sr", "Serbian"),
    ("sk", "Slovak"), ("sl", "Slovenian"), ("es", "Spanish"), ("sw", "Swahili"),
    ("sv", "Swedish"), ("tl", "Tagalog"), ("ta", "Tamil"), ("th", "Thai"),
    ("tr", "Turkish"), ("uk", "Ukrainian"), ("ur", "Urdu"), ("vi", "Vietnamese"),
    ("cy", "Welsh"),
)


def search_languages(query: str | None) -> list[LanguageEntry]:
    """
    Case-insensitive substring match on language name or code.

    A blank query or '*' returns the whole catalogue in its fixed order.
    """
    entries = [LanguageEntry(code=code, name=name) for code, name in SUPPORTED_LANGUAGES]
    q = (query or "").strip().lower()
    if not q or q == "*":
        return entries
    return [e for e in entries if q in e.name.lower() or q in e.code.lower()]
