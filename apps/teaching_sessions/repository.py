from django.db import transaction
from django.db.models import F

from .exceptions import ConcurrentModification, SessionNotFound
from .models import Session


class SessionRepository:
    """
    Accès en base aux séances avec verrou optimiste.

    save() n'écrit que si la version en base est celle lue avant la
    transition ; chaque écriture réussie incrémente la version.
    """

    def __init__(self, queryset=None):
        self.queryset = queryset if queryset is not None else Session.objects.all()

    def load(self, session_id):
        try:
            return self.queryset.select_related('teacher').get(pk=session_id)
        except Session.DoesNotExist:
            raise SessionNotFound() from None

    def save(self, session_id, expected_version, changes):
        with transaction.atomic():
            updated = self.queryset.filter(pk=session_id, version=expected_version).update(
                version=F('version') + 1,
                **changes
            )
            if updated:
                return self.load(session_id)
            if not self.queryset.filter(pk=session_id).exists():
                raise SessionNotFound()
            raise ConcurrentModification(expected_version=expected_version)

    def delete(self, session_id, expected_version):
        with transaction.atomic():
            deleted, _ = self.queryset.filter(pk=session_id, version=expected_version).delete()
            if deleted:
                return
            if not self.queryset.filter(pk=session_id).exists():
                raise SessionNotFound()
            raise ConcurrentModification(expected_version=expected_version)
