import re

from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_GET, require_http_methods

from apps.dashboard.decorators import (
    BadRequest,
    api_login_required,
    api_view,
    parse_json_body,
    staff_required,
)
from apps.dashboard.services import teacher_stats

from .models import PacteHistory, User
from .services import NotATeacher, set_pacte_status

SCHOOL_YEAR_PATTERN = re.compile(r'^\d{4}-\d{4}$')


def _user_to_dict(user):
    return {
        'id': user.pk,
        'email': user.email,
        'nom': user.nom,
        'prenom': user.prenom,
        'name': user.get_full_name(),
        'initials': user.initials,
        'role': user.role,
        'in_pacte': user.in_pacte,
    }


def _history_to_dict(entry):
    return {
        'id': entry.pk,
        'teacher_id': entry.teacher_id,
        'teacher_name': entry.teacher_name,
        'previous_status': entry.previous_status,
        'new_status': entry.new_status,
        'reason': entry.reason,
        'school_year': entry.school_year,
        'changed_by': entry.changed_by.get_full_name(),
        'created_at': entry.created_at.isoformat(),
    }


@require_GET
@api_view
@api_login_required
def current_user(request):
    return JsonResponse(_user_to_dict(request.user))


@require_GET
@api_view
@staff_required
def pacte_teachers(request):
    """Enseignants actifs avec leur statut PACTE et leurs statistiques de l'année."""
    return JsonResponse({'results': teacher_stats()})


@require_http_methods(["PATCH"])
@api_view
@staff_required
def pacte_teacher(request, teacher_id):
    """Corps : {"in_pacte": true, "reason": "...", "school_year": "2025-2026"}."""
    teacher = get_object_or_404(User, pk=teacher_id)
    data = parse_json_body(request)

    in_pacte = data.get('in_pacte')
    if not isinstance(in_pacte, bool):
        raise BadRequest("Statut PACTE manquant.", fields={'in_pacte': ["Valeur booléenne attendue."]})
    school_year = data.get('school_year') or None
    if school_year and not SCHOOL_YEAR_PATTERN.match(school_year):
        raise BadRequest("Année scolaire invalide.", fields={'school_year': ["Format AAAA-AAAA attendu."]})

    try:
        entry = set_pacte_status(
            teacher,
            in_pacte,
            request.user,
            reason=(data.get('reason') or '').strip(),
            school_year=school_year,
            request=request,
        )
    except NotATeacher as exc:
        raise BadRequest(str(exc)) from exc

    return JsonResponse({
        'teacher': _user_to_dict(teacher),
        'history': _history_to_dict(entry) if entry else None,
    })


@require_GET
@api_view
@staff_required
def pacte_history(request, teacher_id):
    teacher = get_object_or_404(User, pk=teacher_id)
    entries = PacteHistory.objects.filter(teacher=teacher).select_related('changed_by')
    return JsonResponse({'results': [_history_to_dict(entry) for entry in entries]})
