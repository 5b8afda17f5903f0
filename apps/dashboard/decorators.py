"""
Décorateurs de sécurité pour l'API JSON (authentification, rôles, erreurs).

Toutes les réponses d'erreur suivent le même contrat :
    {"error": {"code": "...", "message": "..."}}
"""
import json
import logging
import uuid
from functools import wraps

from django.core.exceptions import PermissionDenied, ValidationError
from django.http import Http404, JsonResponse

from apps.accounts.models import User
from apps.teaching_sessions.exceptions import LifecycleError

logger = logging.getLogger(__name__)


def json_error(status, code, message, **extra):
    payload = {'code': code, 'message': message}
    payload.update(extra)
    return JsonResponse({'error': payload}, status=status)


class BadRequest(Exception):
    """Entrée invalide côté client (400)."""

    def __init__(self, message, fields=None):
        super().__init__(message)
        self.message = message
        self.fields = fields


def parse_json_body(request):
    """Décode le corps JSON d'une requête ; un corps vide donne un dict vide."""
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (ValueError, UnicodeDecodeError) as exc:
        raise BadRequest("Corps JSON invalide.") from exc
    if not isinstance(data, dict):
        raise BadRequest("Le corps JSON doit être un objet.")
    return data


def api_view(view_func):
    """
    Enveloppe une vue JSON : convertit les erreurs métier en réponses 4xx et
    masque les erreurs internes derrière un identifiant de requête.
    """
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        try:
            return view_func(request, *args, **kwargs)
        except LifecycleError as exc:
            return json_error(exc.status_code, exc.code, exc.message, **exc.details)
        except Http404:
            return json_error(404, 'not_found', 'Not found')
        except PermissionDenied:
            return json_error(403, 'forbidden', 'Forbidden')
        except BadRequest as exc:
            extra = {'fields': exc.fields} if exc.fields else {}
            return json_error(400, 'bad_request', exc.message, **extra)
        except ValidationError as exc:
            return json_error(400, 'bad_request', ' '.join(exc.messages))
        except Exception:
            request_id = uuid.uuid4().hex
            logger.exception("Unhandled API error (request_id=%s) on %s", request_id, request.path)
            return json_error(
                500,
                'server_error',
                'Une erreur interne est survenue.',
                request_id=request_id,
            )

    return wrapper


def api_login_required(view_func):
    """401 JSON au lieu d'une redirection vers la page de connexion."""
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return json_error(401, 'auth_required', 'Authentication required')
        return view_func(request, *args, **kwargs)

    return wrapper


def role_required(*roles):
    """
    Restreint une vue JSON aux rôles donnés (403 sinon).
    Implique api_login_required.
    """
    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            if not request.user.is_authenticated:
                return json_error(401, 'auth_required', 'Authentication required')
            if request.user.role not in roles:
                return json_error(403, 'forbidden', 'Forbidden')
            return view_func(request, *args, **kwargs)

        return wrapper

    return decorator


def staff_required(view_func):
    """Secrétariat, direction ou administration."""
    return role_required(*User.STAFF_ROLES)(view_func)


def admin_required(view_func):
    """Administrateurs uniquement."""
    return role_required(User.Role.ADMIN)(view_func)
