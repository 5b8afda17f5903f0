from django.urls import path

from . import views

app_name = 'teaching_sessions'

urlpatterns = [
    path('sessions/', views.session_collection, name='session_collection'),
    path('sessions/<int:session_id>/', views.session_detail, name='session_detail'),
    path('sessions/<int:session_id>/transition/', views.session_transition, name='session_transition'),
    path('sessions/<int:session_id>/correct-type/', views.session_correct_type, name='session_correct_type'),
    path('sessions/<int:session_id>/edit-status/', views.session_edit_status, name='session_edit_status'),
    path(
        'sessions/<int:session_id>/allowed-transitions/',
        views.session_allowed_transitions,
        name='session_allowed_transitions',
    ),
]
