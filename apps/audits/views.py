from django.core.paginator import Paginator
from django.db.models import Q
from django.http import JsonResponse
from django.views.decorators.http import require_GET

from apps.accounts.models import User
from apps.dashboard.decorators import api_view, role_required

from .models import LogAudit


@require_GET
@api_view
@role_required(User.Role.PRINCIPAL, User.Role.ADMIN)
def audit_list(request):
    """
    Recherche dans le journal d'audit.
    Filtres : q (texte), role, niveau, objet_type, objet_id ; pagination par 50.
    """
    query = request.GET.get('q', '')
    role_filter = request.GET.get('role', '')
    niveau_filter = request.GET.get('niveau', '')
    objet_type = request.GET.get('objet_type', '')
    objet_id = request.GET.get('objet_id', '')

    logs = LogAudit.objects.select_related('id_utilisateur').order_by('-date_action', '-id_log')

    if query:
        logs = logs.filter(
            Q(action__icontains=query) |
            Q(id_utilisateur__email__icontains=query) |
            Q(id_utilisateur__nom__icontains=query) |
            Q(id_utilisateur__prenom__icontains=query)
        )

    if role_filter:
        logs = logs.filter(id_utilisateur__role=role_filter)

    if niveau_filter:
        logs = logs.filter(niveau=niveau_filter)

    if objet_type:
        logs = logs.filter(objet_type=objet_type)
    if objet_id.isdigit():
        logs = logs.filter(objet_id=int(objet_id))

    paginator = Paginator(logs, 50)
    page_obj = paginator.get_page(request.GET.get('page'))

    return JsonResponse({
        'count': paginator.count,
        'page': page_obj.number,
        'num_pages': paginator.num_pages,
        'results': [log.to_dict() for log in page_obj],
    })
