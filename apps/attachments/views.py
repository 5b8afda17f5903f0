from django.core.exceptions import PermissionDenied
from django.http import FileResponse, Http404, HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from apps.audits.utils import log_action
from apps.dashboard.decorators import BadRequest, api_login_required, api_view, staff_required
from apps.teaching_sessions.repository import SessionRepository
from apps.teaching_sessions.services import can_view

from .models import Attachment
from .store import AttachmentStore


def _visible_attachment(request, attachment_id):
    attachment = get_object_or_404(Attachment.objects.select_related('session'), pk=attachment_id)
    if not can_view(request.user, attachment.session):
        raise PermissionDenied
    return attachment


@require_http_methods(["GET", "POST"])
@api_view
@api_login_required
def session_attachments(request, session_id):
    """
    GET  : pièces jointes de la séance (?archived=1 pour inclure les archivées).
    POST : dépôt d'un fichier (champ multipart `file`).
    """
    session = SessionRepository().load(session_id)
    if not can_view(request.user, session):
        raise PermissionDenied
    store = AttachmentStore()

    if request.method == 'POST':
        uploaded = request.FILES.get('file')
        if uploaded is None:
            raise BadRequest("Aucun fichier reçu.", fields={'file': ["Ce champ est obligatoire."]})
        attachment = store.add(session, uploaded, request.user)
        log_action(
            request.user,
            f"Pièce jointe « {attachment.original_name} » déposée sur la séance {session.pk}",
            request,
            objet_type='ATTACHMENT',
            objet_id=attachment.pk
        )
        return JsonResponse(attachment.to_dict(), status=201)

    include_archived = request.GET.get('archived') in ('1', 'true')
    attachments = store.for_session(session.pk, include_archived=include_archived)
    return JsonResponse({
        'counts': store.counts(session.pk),
        'results': [attachment.to_dict() for attachment in attachments],
    })


@require_GET
@api_view
@api_login_required
def attachment_download(request, attachment_id):
    attachment = _visible_attachment(request, attachment_id)
    try:
        handle = attachment.file.open('rb')
    except FileNotFoundError:
        raise Http404 from None
    return FileResponse(
        handle,
        as_attachment=True,
        filename=attachment.original_name,
        content_type=attachment.mime_type,
    )


@require_POST
@api_view
@staff_required
def attachment_verify(request, attachment_id):
    attachment = _visible_attachment(request, attachment_id)
    AttachmentStore().verify(attachment, request.user)
    log_action(
        request.user,
        f"Pièce jointe {attachment.pk} vérifiée (séance {attachment.session_id})",
        request,
        objet_type='ATTACHMENT',
        objet_id=attachment.pk
    )
    return JsonResponse(attachment.to_dict())


@require_POST
@api_view
@staff_required
def attachment_archive(request, attachment_id):
    attachment = _visible_attachment(request, attachment_id)
    AttachmentStore().archive(attachment, request.user)
    log_action(
        request.user,
        f"Pièce jointe {attachment.pk} archivée (séance {attachment.session_id})",
        request,
        objet_type='ATTACHMENT',
        objet_id=attachment.pk
    )
    return JsonResponse(attachment.to_dict())


@require_http_methods(["DELETE"])
@api_view
@api_login_required
def attachment_detail(request, attachment_id):
    attachment = _visible_attachment(request, attachment_id)
    attachment_pk, session_id = attachment.pk, attachment.session_id
    AttachmentStore().delete(attachment)
    log_action(
        request.user,
        f"Pièce jointe {attachment_pk} supprimée (séance {session_id})",
        request,
        niveau='WARNING',
        objet_type='ATTACHMENT',
        objet_id=attachment_pk
    )
    return HttpResponse(status=204)
