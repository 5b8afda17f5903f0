"""
Erreurs du cycle de vie des séances.

Ce sont des échecs de validation déterministes : ils remontent tels quels à
l'appelant (réponse 4xx) et ne sont jamais rejoués automatiquement, sauf
ConcurrentModification que le service rejoue après relecture.
"""


class LifecycleError(Exception):
    code = 'lifecycle_error'
    status_code = 400
    default_message = "Opération refusée."

    def __init__(self, message=None, **details):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class IllegalTransition(LifecycleError):
    code = 'illegal_transition'
    status_code = 409
    default_message = "Transition non autorisée."


class MissingRequiredComment(LifecycleError):
    code = 'missing_comment'
    status_code = 400
    default_message = "Un commentaire est obligatoire pour cette décision."


class EditWindowExpired(LifecycleError):
    code = 'edit_window_expired'
    status_code = 403
    default_message = "Le délai de modification a expiré."


class IncompletePayload(LifecycleError):
    code = 'incomplete_payload'
    status_code = 422
    default_message = "La déclaration est incomplète."


class DocumentsRequired(LifecycleError):
    code = 'documents_required'
    status_code = 422
    default_message = "Une pièce jointe vérifiée est requise avant validation."


class TypeCorrectionLocked(LifecycleError):
    code = 'type_locked'
    status_code = 409
    default_message = "Le type ne peut plus être corrigé à ce stade."


class SessionNotFound(LifecycleError):
    code = 'not_found'
    status_code = 404
    default_message = "Séance introuvable."


class ConcurrentModification(LifecycleError):
    code = 'conflict'
    status_code = 409
    default_message = "La séance a été modifiée entre-temps. Rechargez et réessayez."
