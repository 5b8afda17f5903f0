from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_GET, require_POST

from apps.dashboard.decorators import api_login_required, api_view

from .models import Notification


@require_GET
@api_view
@api_login_required
def notification_list(request):
    """Notifications de l'utilisateur connecté ; ?unread=1 pour les non lues."""
    qs = Notification.objects.filter(id_utilisateur=request.user)
    if request.GET.get('unread') in ('1', 'true'):
        qs = qs.filter(lue=False)
    return JsonResponse({
        'unread_count': Notification.objects.filter(id_utilisateur=request.user, lue=False).count(),
        'results': [notification.to_dict() for notification in qs[:100]],
    })


@require_POST
@api_view
@api_login_required
def notification_read(request, notification_id):
    notification = get_object_or_404(Notification, pk=notification_id, id_utilisateur=request.user)
    if not notification.lue:
        notification.lue = True
        notification.save(update_fields=['lue'])
    return JsonResponse(notification.to_dict())


@require_POST
@api_view
@api_login_required
def notification_read_all(request):
    updated = Notification.objects.filter(id_utilisateur=request.user, lue=False).update(lue=True)
    return JsonResponse({'updated': updated})
