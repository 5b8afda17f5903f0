from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_http_methods

from apps.audits.utils import log_action
from apps.teaching_sessions.models import Session

from .decorators import (
    BadRequest,
    admin_required,
    api_login_required,
    api_view,
    parse_json_body,
    staff_required,
)
from .forms import SystemSettingsForm
from .models import SystemSettings
from .services import status_summary, teacher_stats


@require_http_methods(["GET", "PATCH"])
@api_view
@api_login_required
def system_settings(request):
    """
    GET   : paramètres en vigueur (tous les rôles, pour l'affichage du délai).
    PATCH : modification, administrateurs uniquement.
    """
    if request.method == 'GET':
        return JsonResponse(SystemSettings.get_settings().to_dict())
    return update_system_settings(request)


@admin_required
def update_system_settings(request):
    current = SystemSettings.get_settings()
    data = {
        'session_edit_window_minutes': current.session_edit_window_minutes,
        'require_verified_attachments': current.require_verified_attachments,
    }
    data.update(parse_json_body(request))
    instance = SystemSettings.objects.get(pk=current.pk)
    form = SystemSettingsForm(data, instance=instance)
    if not form.is_valid():
        raise BadRequest(
            "Paramètres invalides.",
            fields={name: list(errors) for name, errors in form.errors.items()},
        )

    updated = form.save(commit=False)
    updated.modified_by = request.user
    updated.save()

    log_action(
        request.user,
        f"CRITIQUE: Modification des paramètres système (délai : {updated.session_edit_window_minutes} min, "
        f"pièce vérifiée obligatoire : {'oui' if updated.require_verified_attachments else 'non'})",
        request,
        niveau='CRITIQUE',
        objet_type='SETTINGS',
        objet_id=updated.pk
    )
    return JsonResponse(updated.to_dict())


@require_GET
@api_view
@staff_required
def report_summary(request):
    """Compteurs par statut et par type, filtrables par période (date_from, date_to)."""
    qs = Session.objects.all()
    date_from = request.GET.get('date_from')
    date_to = request.GET.get('date_to')
    if date_from:
        qs = qs.filter(date__gte=date_from)
    if date_to:
        qs = qs.filter(date__lte=date_to)
    return JsonResponse(status_summary(qs))


@require_GET
@api_view
@staff_required
def report_teachers(request):
    in_pacte = request.GET.get('in_pacte')
    flag = None
    if in_pacte is not None:
        if in_pacte not in ('0', '1', 'true', 'false'):
            raise BadRequest("Paramètre in_pacte invalide.")
        flag = in_pacte in ('1', 'true')
    return JsonResponse({'results': teacher_stats(in_pacte=flag)})
