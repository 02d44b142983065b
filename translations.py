import logging
from typing import Dict

from flask_caching import Cache

from sheets import TranslationDocument

# Setup logging
logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "common"
KEY_COLUMN = "key"
CACHE_TTL = 60 * 60  # 1 hour


class TranslationsError(Exception):
    """Translations could not be retrieved. The cause is chained, not exposed."""


class SheetNotFoundError(LookupError):
    pass


class LanguageColumnNotFoundError(LookupError):
    pass


class TranslationsService:
    def __init__(self, cache: Cache, document: TranslationDocument, ttl: int = CACHE_TTL):
        self.cache = cache
        self.document = document
        self.ttl = ttl

    def get_translations(self, lang: str, ns: str = DEFAULT_NAMESPACE) -> Dict[str, str]:
        """
        Main entry point.
        Returns {key: text} for one language of one namespace (sheet).
        Results are cached for self.ttl seconds.
        """
        cache_key = self._get_cache_key(ns, lang)
        cached = self.cache.get(cache_key)

        if cached is not None:
            logger.info("Translations for ns: %s, lang: %s found in cache.", ns, lang)
            return cached

        logger.info("Fetching translations for ns: %s, lang: %s from Google Sheets.", ns, lang)
        try:
            translations = self._fetch(lang, ns)
        except Exception as e:
            logger.error(
                "Failed to fetch translations for ns: %s, lang: %s from Google Sheet: %s",
                ns, lang, e, exc_info=True,
            )
            raise TranslationsError(
                f"Failed to retrieve translations for {lang}. "
                "Please check sheet permissions or configuration."
            ) from e

        self.cache.set(cache_key, translations, timeout=self.ttl)
        logger.info("Translations for ns: %s, lang: %s fetched and cached.", ns, lang)
        return translations

    def _fetch(self, lang, ns):
        self.document.load_metadata()

        sheet = self.document.sheet_by_title(ns)
        if sheet is None:
            logger.warning("Sheet (namespace) '%s' not found in spreadsheet.", ns)
            raise SheetNotFoundError(f"Translations sheet '{ns}' not found.")

        sheet.load_header_row()
        if lang not in sheet.header_values:
            logger.warning("Language column '%s' not found in sheet '%s'.", lang, ns)
            raise LanguageColumnNotFoundError(f"Language column '{lang}' not found in sheet '{ns}'.")

        return self._rows_to_map(sheet.get_rows(), lang)

    def _rows_to_map(self, rows, lang):
        """Pure logic: keep rows that have both a key and a value for lang."""
        translations = {}
        for row in rows:
            key = row.get(KEY_COLUMN)
            value = row.get(lang)
            if key and value:
                translations[key] = value
        return translations

    def _get_cache_key(self, ns, lang):
        return f"translations:{ns}:{lang}"
