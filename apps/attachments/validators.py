"""
Contrôle des pièces jointes déposées : nom, extension, taille, signature
binaire et type MIME réel (python-magic).
"""
import os
import re
import uuid
from pathlib import Path

from django.conf import settings
from django.core.exceptions import ValidationError

try:
    import magic
except ImportError:  # pragma: no cover
    magic = None

ALLOWED_EXTENSIONS = {".pdf", ".jpg", ".jpeg", ".png"}

ALLOWED_MIME_BY_EXTENSION = {
    ".pdf": {"application/pdf"},
    ".jpg": {"image/jpeg"},
    ".jpeg": {"image/jpeg"},
    ".png": {"image/png"},
}

MAGIC_SIGNATURES = {
    ".pdf": (b"%PDF-",),
    ".jpg": (b"\xff\xd8\xff",),
    ".jpeg": (b"\xff\xd8\xff",),
    ".png": (b"\x89PNG\r\n\x1a\n",),
}

DANGEROUS_INTERMEDIATE_EXTENSIONS = {
    ".php", ".phtml", ".phar", ".cgi", ".pl", ".py", ".sh", ".bash", ".js",
    ".jar", ".exe", ".msi", ".bat", ".cmd", ".com", ".scr", ".dll",
}

SAFE_FILENAME_PATTERN = re.compile(r"^[\w.() -]{1,255}$")

FORMAT_ERROR = "Format de fichier non accepté. Autorisés : PDF, JPG, JPEG, PNG."


class AttachmentValidationError(ValidationError):
    """Pièce jointe refusée."""


def max_upload_size_bytes() -> int:
    return settings.ATTACHMENT_MAX_UPLOAD_MB * 1024 * 1024


def _normalize_mime(value: str | None) -> str:
    if not value:
        return ""
    return value.split(";", 1)[0].strip().lower()


def _clean_filename(file_name: str) -> tuple[str, str]:
    if not file_name or "\x00" in file_name or "/" in file_name or "\\" in file_name:
        raise AttachmentValidationError("Nom de fichier invalide.")

    clean_name = os.path.basename(file_name).strip()
    if not clean_name or clean_name.startswith(".") or ".." in clean_name:
        raise AttachmentValidationError("Nom de fichier invalide.")
    if not SAFE_FILENAME_PATTERN.fullmatch(clean_name):
        raise AttachmentValidationError("Nom de fichier invalide.")

    suffixes = [suffix.lower() for suffix in Path(clean_name).suffixes]
    if not suffixes or suffixes[-1] not in ALLOWED_EXTENSIONS:
        raise AttachmentValidationError(FORMAT_ERROR)
    if any(ext in DANGEROUS_INTERMEDIATE_EXTENSIONS for ext in suffixes[:-1]):
        raise AttachmentValidationError("Nom de fichier dangereux détecté.")

    return clean_name, suffixes[-1]


def validate_attachment(uploaded_file) -> dict:
    """
    Valide un fichier déposé et renvoie ses métadonnées
    (nom nettoyé, extension, type MIME détecté, taille).

    Le pointeur du fichier est remis à zéro avant retour.
    """
    if uploaded_file is None:
        raise AttachmentValidationError("Aucun fichier reçu.")

    clean_name, extension = _clean_filename(uploaded_file.name or "")

    if not uploaded_file.size:
        raise AttachmentValidationError("Fichier vide ou invalide.")
    if uploaded_file.size > max_upload_size_bytes():
        raise AttachmentValidationError(
            f"Le fichier est trop volumineux. Taille maximale autorisée : "
            f"{settings.ATTACHMENT_MAX_UPLOAD_MB} Mo."
        )

    if magic is None:
        raise AttachmentValidationError("Validation de signature indisponible sur le serveur.")

    head = uploaded_file.read(8192)
    uploaded_file.seek(0)
    if not head:
        raise AttachmentValidationError("Fichier vide ou invalide.")

    if not any(head.startswith(signature) for signature in MAGIC_SIGNATURES[extension]):
        raise AttachmentValidationError("Signature binaire invalide pour ce type de fichier.")

    allowed_mimes = ALLOWED_MIME_BY_EXTENSION[extension]
    detected_mime = _normalize_mime(magic.from_buffer(head, mime=True))
    if detected_mime not in allowed_mimes:
        raise AttachmentValidationError("Type MIME réel incohérent avec l'extension du fichier.")

    declared_mime = _normalize_mime(getattr(uploaded_file, "content_type", ""))
    if declared_mime and declared_mime not in allowed_mimes:
        raise AttachmentValidationError("Type MIME déclaré invalide pour ce format.")

    return {
        "filename": clean_name,
        "extension": extension,
        "mime_type": detected_mime,
        "size": uploaded_file.size,
    }


def random_storage_name(extension: str) -> str:
    """Nom de stockage aléatoire ; seul le suffixe validé est conservé."""
    normalized = (extension or "").lower().strip()
    if not normalized.startswith("."):
        normalized = f".{normalized}"
    if normalized not in ALLOWED_EXTENSIONS:
        raise AttachmentValidationError("Extension de fichier invalide.")
    return f"{uuid.uuid4().hex}{normalized}"
