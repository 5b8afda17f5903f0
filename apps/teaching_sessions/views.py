"""
API JSON des déclarations de séances.

Les droits de transition sont portés par lifecycle.TRANSITIONS ; les vues ne
font que vérifier l'authentification et la visibilité de la séance.
"""

from django.conf import settings
from django.core.exceptions import PermissionDenied
from django.http import HttpResponse, JsonResponse
from django.views.decorators.http import require_GET, require_http_methods, require_POST
from django_ratelimit.decorators import ratelimit

from apps.accounts.models import User
from apps.attachments.store import AttachmentStore
from apps.audits.ip_utils import ratelimit_user_or_ip
from apps.dashboard.decorators import (
    BadRequest,
    api_login_required,
    api_view,
    json_error,
    parse_json_body,
    staff_required,
)

from . import services
from .forms import SessionForm, changed_values, edit_form
from .lifecycle import normalize_status
from .repository import SessionRepository
from .serializers import session_to_dict


def _transition_rate_limit(group, request) -> str:
    return settings.TRANSITION_RATE_LIMIT


def _form_error(form):
    return BadRequest(
        "Données invalides.",
        fields={name: list(errors) for name, errors in form.errors.items()},
    )


def _visible_session(request, session_id):
    session = SessionRepository().load(session_id)
    if not services.can_view(request.user, session):
        raise PermissionDenied
    return session


def _owner_for_creation(request, data):
    """Un enseignant déclare pour lui-même ; le personnel indique l'enseignant."""
    if request.user.role == User.Role.TEACHER:
        return request.user
    if not request.user.is_school_staff:
        raise PermissionDenied
    teacher_id = data.get('teacher_id')
    if not teacher_id:
        raise BadRequest("Enseignant manquant.", fields={'teacher_id': ["Ce champ est obligatoire."]})
    try:
        return User.objects.teachers().get(pk=teacher_id)
    except (User.DoesNotExist, ValueError, TypeError):
        raise BadRequest("Enseignant introuvable.", fields={'teacher_id': ["Enseignant inconnu ou inactif."]}) from None


@require_http_methods(["GET", "POST"])
@api_view
@api_login_required
def session_collection(request):
    """
    GET  : liste des séances visibles (filtres status, type, teacher_id).
    POST : nouvelle déclaration.
    """
    if request.method == 'POST':
        data = parse_json_body(request)
        teacher = _owner_for_creation(request, data)
        form = SessionForm(data=data)
        if not form.is_valid():
            raise _form_error(form)
        fields = {name: form.cleaned_data[name] for name in form.Meta.fields}
        session = services.create_session(teacher, fields, request.user, request)
        return JsonResponse(session_to_dict(session), status=201)

    qs = services.sessions_for(request.user)
    status = request.GET.get('status')
    if status:
        qs = qs.filter(status=normalize_status(status))
    session_type = request.GET.get('type')
    if session_type:
        qs = qs.filter(type=session_type)
    teacher_id = request.GET.get('teacher_id')
    if teacher_id and request.user.is_school_staff:
        if not teacher_id.isdigit():
            raise BadRequest("teacher_id invalide.")
        qs = qs.filter(teacher_id=int(teacher_id))

    return JsonResponse({'results': [session_to_dict(session) for session in qs]})


@require_http_methods(["GET", "PATCH", "DELETE"])
@api_view
@api_login_required
def session_detail(request, session_id):
    session = _visible_session(request, session_id)

    if request.method == 'DELETE':
        services.delete_session(session.pk, request.user, request)
        return HttpResponse(status=204)

    if request.method == 'PATCH':
        form = edit_form(session, parse_json_body(request))
        if not form.is_valid():
            raise _form_error(form)
        session = services.update_session(
            session.pk, changed_values(form, session), request.user, request
        )

    counts = AttachmentStore().counts(session.pk)
    return JsonResponse(session_to_dict(session, attachment_counts=counts))


@require_POST
@api_view
@api_login_required
@ratelimit(key=ratelimit_user_or_ip, rate=_transition_rate_limit, method='POST', block=False)
def session_transition(request, session_id):
    """
    Corps : {"status": "...", "comment": "..."}.
    Le commentaire est obligatoire pour un refus ou une demande de pièces.
    """
    if getattr(request, 'limited', False):
        response = json_error(429, 'rate_limited', 'Too Many Requests')
        response['Retry-After'] = '60'
        return response

    session = _visible_session(request, session_id)
    data = parse_json_body(request)
    requested = data.get('status')
    if not requested:
        raise BadRequest("Statut demandé manquant.", fields={'status': ["Ce champ est obligatoire."]})

    session = services.change_status(
        session.pk, requested, request.user, data.get('comment'), request=request
    )
    return JsonResponse(session_to_dict(session))


@require_POST
@api_view
@staff_required
def session_correct_type(request, session_id):
    data = parse_json_body(request)
    new_type = data.get('type')
    if not new_type:
        raise BadRequest("Type manquant.", fields={'type': ["Ce champ est obligatoire."]})
    session = services.correct_type(session_id, new_type, request.user, request)
    return JsonResponse(session_to_dict(session))


@require_GET
@api_view
@api_login_required
def session_edit_status(request, session_id):
    session = _visible_session(request, session_id)
    return JsonResponse(services.edit_status(session))


@require_GET
@api_view
@api_login_required
def session_allowed_transitions(request, session_id):
    session = _visible_session(request, session_id)
    statuses = services.next_statuses(session, request.user)
    return JsonResponse({
        'current': session.status,
        'allowed': [
            {'status': status.value, 'label': status.label}
            for status in statuses
        ],
    })
