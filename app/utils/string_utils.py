import re
import unicodedata
from urllib.parse import urlparse


def safe_filename(value: str) -> str:
    """
    Nettoie un nom de fichier pour l'utiliser dans un chemin de stockage:
    - retire les accents
    - garde lettres, chiffres, points, tirets et underscores
    - remplace le reste par '_'
    Exemple: 'Œuvre n°1 (final).JPG' -> 'OEuvre_n_1_final_.JPG'
    """
    if not value:
        return "file"
    s = str(value).replace("Œ", "OE").replace("œ", "oe")
    # décomposer les accents
    s = unicodedata.normalize('NFKD', s)
    s = ''.join(ch for ch in s if not unicodedata.combining(ch))
    # pas de séparateur de chemin dans un nom de fichier
    s = s.replace("/", "_").replace("\\", "_")
    s = re.sub(r'[^A-Za-z0-9._-]+', '_', s)
    s = re.sub(r'_+', '_', s)
    return s or "file"


def is_http_url(value: str) -> bool:
    """Vrai si `value` est une URL http(s) avec un domaine."""
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)
