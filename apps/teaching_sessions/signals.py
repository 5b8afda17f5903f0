"""
Signal émis après chaque changement de statut enregistré.

Les récepteurs (notifications) sont appelés avec send_robust : un échec de
leur côté est journalisé mais n'annule jamais la transition.
"""
from django.dispatch import Signal

# Arguments : event (LifecycleEvent), session (Session à jour)
session_status_changed = Signal()
